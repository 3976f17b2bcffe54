from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

class EnrollmentState(str, Enum):
    not_joined = "not_joined"
    joined = "joined"
    started = "started"
    finished = "finished"

class EnrollmentGet(BaseModel):
    student_id: int
    course_id: int
    joined_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    is_passed: Optional[bool] = None
    score: Optional[int] = None
    state: EnrollmentState
    # Advisory countdown for timed tests; nothing is cut off server side
    remaining_seconds: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)

class AnswerSubmit(BaseModel):
    question_id: int
    answer_id: int

class StudentAnswerGet(BaseModel):
    question_id: int
    question: str
    answer_id: int
    answer: str
    updated_at: Optional[datetime] = None

class QuestionResult(BaseModel):
    question_id: int
    question: str
    answer_id: Optional[int] = None
    answer: Optional[str] = None
    is_correct: bool

class Report(BaseModel):
    course_id: int
    student_id: int
    results: List[QuestionResult]
    total_questions: int
    score: int
    is_passed: bool
    finished_at: Optional[datetime] = None
