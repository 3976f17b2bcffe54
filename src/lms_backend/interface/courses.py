from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from lms_backend.interface.base import ListQuery
from lms_backend.interface.enrollments import QuestionResult

class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    image: Optional[str] = None
    category_id: int
    test_duration: float = Field(0, ge=0, description="Test duration in minutes, 0 means untimed")
    published_at: Optional[datetime] = None

class CourseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    image: Optional[str] = None
    category_id: Optional[int] = None
    test_duration: Optional[float] = Field(None, ge=0)
    published_at: Optional[datetime] = None

class CourseGet(BaseModel):
    id: int
    name: str
    slug: str
    image: Optional[str] = None
    category_id: int
    test_duration: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CourseTeacher(BaseModel):
    id: int
    name: str
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class CourseDetail(CourseGet):
    teachers: List[CourseTeacher] = []
    total_students: int = 0

class CourseQuery(ListQuery):
    search: Optional[str] = None
    category_id: Optional[int] = None

class StudentCourseList(CourseGet):
    joined_at: datetime
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    is_passed: Optional[bool] = None
    score: Optional[int] = None

class CourseStudentList(BaseModel):
    id: int
    name: str
    image: Optional[str] = None
    joined_at: datetime
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    is_passed: Optional[bool] = None
    score: Optional[int] = None
    report: Optional[List[QuestionResult]] = None

class TeacherAdd(BaseModel):
    user_id: int
