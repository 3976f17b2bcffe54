"""
Test helpers shared by the test modules.
"""

from typing import Dict, Iterable, List, Sequence, Tuple
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from lms_backend.interface.courses import CourseCreate
from lms_backend.interface.questions import AnswerOptionCreate, QuestionCreate
from lms_backend.model.auth import User
from lms_backend.model.role import Role
from lms_backend.services.courses import create_answer_option, create_course, create_question
from lms_backend.services.organizations import assign_role, get_default_organization
from lms_backend.services.users import signup

ADMIN_EMAIL = "admin@school.org"
ADMIN_PASSWORD = "admin-password"
PASSWORD = "password123"


def create_user(db: Session, name: str, email: str, role_keys: Iterable[str] = ()) -> User:
    """Sign up a user and grant additional roles in the default organization"""
    user = signup(name, email, PASSWORD, db)
    organization = get_default_organization(db)

    for key in role_keys:
        role = db.query(Role).filter(Role.key == key).one()
        assign_role(user.id, role.id, organization.id, db)

    db.commit()
    return user


def login(client: TestClient, email: str, password: str = PASSWORD) -> Dict[str, str]:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['session_token']}"}


def build_course(db: Session, teacher_id: int, category_id: int, name: str, questions: Sequence[Tuple[str, List[Tuple[str, bool]]]]) -> Dict:
    """
    Create a course with questions and answer options.

    Returns the course id and, per question, its id and the ids of its
    options in the order given.
    """
    course = create_course(teacher_id, CourseCreate(name=name, category_id=category_id), db)

    built = {"course_id": course.id, "questions": []}

    for text, options in questions:
        question = create_question(course.id, QuestionCreate(question=text), db)
        option_ids = [
            create_answer_option(course.id, AnswerOptionCreate(question_id=question.id, value=value, is_correct=is_correct), db).id
            for value, is_correct in options
        ]
        built["questions"].append({"id": question.id, "options": option_ids})

    return built
