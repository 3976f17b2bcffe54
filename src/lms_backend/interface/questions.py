from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class QuestionCreate(BaseModel):
    question: str = Field(min_length=1)

class QuestionUpdate(BaseModel):
    question: str = Field(min_length=1)

class QuestionGet(BaseModel):
    id: int
    question: str
    course_id: int

    model_config = ConfigDict(from_attributes=True)

class AnswerOptionCreate(BaseModel):
    question_id: int
    value: str = Field(min_length=1)
    is_correct: bool = False

class AnswerOptionUpdate(BaseModel):
    value: Optional[str] = Field(None, min_length=1)
    is_correct: Optional[bool] = None

class AnswerOptionPublic(BaseModel):
    id: int
    value: str

    model_config = ConfigDict(from_attributes=True)

class AnswerOptionGet(AnswerOptionPublic):
    question_id: int
    is_correct: bool

class QuestionWithOptions(QuestionGet):
    answer_options: List[AnswerOptionPublic] = []

class QuestionWithOptionsTeacher(QuestionGet):
    answer_options: List[AnswerOptionGet] = []
