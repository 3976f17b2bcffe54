from typing import Annotated, List
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from lms_backend.database import get_db
from lms_backend.interface.courses import (
    CourseCreate,
    CourseDetail,
    CourseGet,
    CourseQuery,
    CourseStudentList,
    CourseTeacher,
    CourseUpdate,
    StudentCourseList,
    TeacherAdd,
)
from lms_backend.interface.enrollments import AnswerSubmit, EnrollmentGet, Report, StudentAnswerGet
from lms_backend.interface.questions import (
    AnswerOptionCreate,
    AnswerOptionGet,
    AnswerOptionUpdate,
    QuestionCreate,
    QuestionGet,
    QuestionUpdate,
    QuestionWithOptions,
    QuestionWithOptionsTeacher,
)
from lms_backend.permissions.auth import get_current_principal, require_course_teacher, require_permissions
from lms_backend.permissions.core import is_course_teacher
from lms_backend.permissions.principal import Principal
from lms_backend.services import courses as course_service
from lms_backend.services import enrollment as enrollment_service
from lms_backend.services.report import compute_report

course_router = APIRouter()

CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
CourseWriter = Annotated[Principal, Depends(require_permissions("write:courses"))]
CourseTeacherPrincipal = Annotated[Principal, Depends(require_course_teacher("write:courses"))]


## Catalog

@course_router.get("", response_model=List[CourseGet])
def list_courses(principal: CurrentPrincipal, response: Response, params: CourseQuery = Depends(), db: Session = Depends(get_db)):

    courses, total = course_service.list_courses(params, db)
    response.headers["X-Total-Count"] = str(total)

    return courses


@course_router.get("/my-courses", response_model=List[StudentCourseList])
def list_my_courses(principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return course_service.list_student_courses(principal.get_user_id_or_throw(), db)


@course_router.get("/teacher/my-courses", response_model=List[CourseGet])
def list_my_teacher_courses(principal: CourseWriter, db: Session = Depends(get_db)):
    return course_service.list_teacher_courses(principal.get_user_id_or_throw(), db)


@course_router.post("", response_model=CourseGet, status_code=201)
def create_course(principal: CourseWriter, entity: CourseCreate, db: Session = Depends(get_db)):
    return course_service.create_course(principal.get_user_id_or_throw(), entity, db)


@course_router.get("/{course_id}", response_model=CourseDetail)
def get_course(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return course_service.get_course_detail(course_id, db)


@course_router.patch("/{course_id}", response_model=CourseGet)
def update_course(course_id: int, principal: CourseTeacherPrincipal, entity: CourseUpdate, db: Session = Depends(get_db)):
    return course_service.update_course(course_id, entity, db)


@course_router.delete("/{course_id}", status_code=204)
def delete_course(course_id: int, principal: CourseTeacherPrincipal, db: Session = Depends(get_db)):
    course_service.delete_course(course_id, db)


## Teachers and students

@course_router.post("/{course_id}/teachers", response_model=List[CourseTeacher], status_code=201)
def add_teacher(course_id: int, principal: CourseTeacherPrincipal, payload: TeacherAdd, db: Session = Depends(get_db)):
    return course_service.add_teacher(course_id, payload.user_id, db)


@course_router.delete("/{course_id}/teachers/{user_id}", response_model=List[CourseTeacher])
def remove_teacher(course_id: int, user_id: int, principal: CourseTeacherPrincipal, db: Session = Depends(get_db)):
    return course_service.remove_teacher(course_id, user_id, db)


@course_router.get("/{course_id}/students", response_model=List[CourseStudentList])
def list_course_students(course_id: int, principal: CourseTeacherPrincipal, with_report: bool = False, db: Session = Depends(get_db)):

    students = course_service.list_course_students(course_id, db)

    if with_report:
        for student in students:
            student.report = compute_report(course_id, student.id, db)

    return students


## Questions and answer options

@course_router.get("/{course_id}/questions", response_model=List[QuestionWithOptionsTeacher] | List[QuestionWithOptions])
def list_questions(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):

    with_solutions = is_course_teacher(principal.get_user_id_or_throw(), course_id, db)

    return course_service.list_questions(course_id, db, with_solutions=with_solutions)


@course_router.post("/{course_id}/questions", response_model=QuestionGet, status_code=201)
def create_question(course_id: int, principal: CourseTeacherPrincipal, entity: QuestionCreate, db: Session = Depends(get_db)):
    return course_service.create_question(course_id, entity, db)


@course_router.put("/{course_id}/questions/{question_id}", response_model=QuestionGet)
def update_question(course_id: int, question_id: int, principal: CourseTeacherPrincipal, entity: QuestionUpdate, db: Session = Depends(get_db)):
    return course_service.update_question(course_id, question_id, entity, db)


@course_router.delete("/{course_id}/questions/{question_id}", status_code=204)
def delete_question(course_id: int, question_id: int, principal: CourseTeacherPrincipal, db: Session = Depends(get_db)):
    course_service.delete_question(course_id, question_id, db)


@course_router.post("/{course_id}/answer-options", response_model=AnswerOptionGet, status_code=201)
def create_answer_option(course_id: int, principal: CourseTeacherPrincipal, entity: AnswerOptionCreate, db: Session = Depends(get_db)):
    return course_service.create_answer_option(course_id, entity, db)


@course_router.put("/{course_id}/answer-options/{option_id}", response_model=AnswerOptionGet)
def update_answer_option(course_id: int, option_id: int, principal: CourseTeacherPrincipal, entity: AnswerOptionUpdate, db: Session = Depends(get_db)):
    return course_service.update_answer_option(course_id, option_id, entity, db)


@course_router.delete("/{course_id}/answer-options/{option_id}", status_code=204)
def delete_answer_option(course_id: int, option_id: int, principal: CourseTeacherPrincipal, db: Session = Depends(get_db)):
    course_service.delete_answer_option(course_id, option_id, db)


## Taking the test

@course_router.get("/{course_id}/enrollment", response_model=EnrollmentGet)
def get_enrollment(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return enrollment_service.describe_enrollment(principal.get_user_id_or_throw(), course_id, db)


@course_router.post("/{course_id}/join", response_model=EnrollmentGet, status_code=201)
def join_course(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return enrollment_service.join_course(principal.get_user_id_or_throw(), course_id, db)


@course_router.post("/{course_id}/start", response_model=EnrollmentGet)
def start_course(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return enrollment_service.start_course(principal.get_user_id_or_throw(), course_id, db)


@course_router.post("/{course_id}/answer", response_model=StudentAnswerGet)
def answer_question(course_id: int, principal: CurrentPrincipal, payload: AnswerSubmit, db: Session = Depends(get_db)):
    return enrollment_service.answer_question(
        principal.get_user_id_or_throw(), course_id, payload.question_id, payload.answer_id, db
    )


@course_router.post("/{course_id}/finish", response_model=EnrollmentGet)
def finish_course(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return enrollment_service.finish_course(principal.get_user_id_or_throw(), course_id, db)


@course_router.get("/{course_id}/answers", response_model=List[StudentAnswerGet])
def list_my_answers(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return enrollment_service.list_student_answers(principal.get_user_id_or_throw(), course_id, db)


@course_router.get("/{course_id}/report", response_model=Report)
def get_report(course_id: int, principal: CurrentPrincipal, db: Session = Depends(get_db)):
    return enrollment_service.get_report(principal.get_user_id_or_throw(), course_id, db)
