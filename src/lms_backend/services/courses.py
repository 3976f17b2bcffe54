import logging
from typing import List, Tuple
from sqlalchemy import exc, func
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    integrity_error_to_conflict,
)
from lms_backend.interface.courses import (
    CourseCreate,
    CourseDetail,
    CourseGet,
    CourseQuery,
    CourseStudentList,
    CourseTeacher,
    CourseUpdate,
    StudentCourseList,
)
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
from lms_backend.model.auth import User
from lms_backend.model.course import (
    Course,
    CourseAnswerOption,
    CourseCategory,
    CourseQuestion,
    StudentCourse,
    TeacherCourse,
)
from lms_backend.utils import slugify

logger = logging.getLogger(__name__)


def get_course_or_404(course_id: int, db: Session) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()

    if course is None:
        raise NotFoundException(detail=f"Course with id [{course_id}] not found")

    return course


def _check_category(category_id: int, db: Session):
    if db.query(CourseCategory.id).filter(CourseCategory.id == category_id).first() is None:
        raise NotFoundException(detail=f"Category with id [{category_id}] not found")


def _course_slug(name: str) -> str:
    slug = slugify(name)
    if not slug:
        raise BadRequestException(detail="Course name must contain at least one letter or digit")
    return slug


## Courses

def create_course(teacher_id: int, entity: CourseCreate, db: Session) -> CourseGet:
    _check_category(entity.category_id, db)

    model_dump = entity.model_dump(exclude_unset=True, exclude_none=True)
    model_dump["slug"] = _course_slug(entity.name)

    try:
        course = Course(**model_dump)
        db.add(course)
        db.flush()

        db.add(TeacherCourse(teacher_id=teacher_id, course_id=course.id))

        db.commit()
        db.refresh(course)
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_conflict(e, "Course")

    logger.info(f"User {teacher_id} created course {course.id} ({course.slug})")
    return CourseGet.model_validate(course, from_attributes=True)


def update_course(course_id: int, entity: CourseUpdate, db: Session) -> CourseGet:
    course = get_course_or_404(course_id, db)

    model_dump = entity.model_dump(exclude_unset=True)

    if model_dump.get("category_id") is not None:
        _check_category(model_dump["category_id"], db)

    if model_dump.get("name") is not None:
        model_dump["slug"] = _course_slug(model_dump["name"])

    try:
        for key, value in model_dump.items():
            # only the image may be cleared
            if value is None and key != "image":
                continue
            setattr(course, key, value)

        db.commit()
        db.refresh(course)
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_conflict(e, "Course")

    return CourseGet.model_validate(course, from_attributes=True)


def delete_course(course_id: int, db: Session):
    course = get_course_or_404(course_id, db)

    db.delete(course)
    db.commit()

    logger.info(f"Deleted course {course_id}")


def list_courses(params: CourseQuery, db: Session) -> Tuple[List[CourseGet], int]:
    query = db.query(Course)

    if params.search:
        query = query.filter(Course.name.ilike(f"%{params.search}%"))
    if params.category_id is not None:
        query = query.filter(Course.category_id == params.category_id)

    total = query.order_by(None).count()

    query = query.order_by(Course.id)

    if params.limit != None:
        query = query.limit(params.limit)
    if params.skip != None:
        query = query.offset(params.skip)

    return [CourseGet.model_validate(course, from_attributes=True) for course in query.all()], total


def get_course_detail(course_id: int, db: Session) -> CourseDetail:
    course = get_course_or_404(course_id, db)

    teachers = (
        db.query(User)
        .join(TeacherCourse, TeacherCourse.teacher_id == User.id)
        .filter(TeacherCourse.course_id == course_id)
        .order_by(User.id)
        .all()
    )

    total_students = db.query(func.count(StudentCourse.student_id)).filter(
        StudentCourse.course_id == course_id
    ).scalar()

    return CourseDetail(
        **CourseGet.model_validate(course, from_attributes=True).model_dump(),
        teachers=[CourseTeacher.model_validate(teacher, from_attributes=True) for teacher in teachers],
        total_students=total_students or 0,
    )


def list_student_courses(student_id: int, db: Session) -> List[StudentCourseList]:
    rows = (
        db.query(Course, StudentCourse)
        .join(StudentCourse, StudentCourse.course_id == Course.id)
        .filter(StudentCourse.student_id == student_id)
        .order_by(StudentCourse.joined_at.desc(), Course.id)
        .all()
    )

    return [
        StudentCourseList(
            **CourseGet.model_validate(course, from_attributes=True).model_dump(),
            joined_at=enrollment.joined_at,
            started_at=enrollment.started_at,
            finished_at=enrollment.finished_at,
            is_passed=enrollment.is_passed,
            score=enrollment.score,
        )
        for course, enrollment in rows
    ]


def list_teacher_courses(teacher_id: int, db: Session) -> List[CourseGet]:
    courses = (
        db.query(Course)
        .join(TeacherCourse, TeacherCourse.course_id == Course.id)
        .filter(TeacherCourse.teacher_id == teacher_id)
        .order_by(Course.id)
        .all()
    )

    return [CourseGet.model_validate(course, from_attributes=True) for course in courses]


def list_course_students(course_id: int, db: Session) -> List[CourseStudentList]:
    get_course_or_404(course_id, db)

    rows = (
        db.query(User, StudentCourse)
        .join(StudentCourse, StudentCourse.student_id == User.id)
        .filter(StudentCourse.course_id == course_id)
        .order_by(StudentCourse.joined_at, User.id)
        .all()
    )

    return [
        CourseStudentList(
            id=user.id,
            name=user.name,
            image=user.image,
            joined_at=enrollment.joined_at,
            started_at=enrollment.started_at,
            finished_at=enrollment.finished_at,
            is_passed=enrollment.is_passed,
            score=enrollment.score,
        )
        for user, enrollment in rows
    ]


## Teachers

def add_teacher(course_id: int, user_id: int, db: Session) -> List[CourseTeacher]:
    get_course_or_404(course_id, db)

    if db.query(User.id).filter(User.id == user_id).first() is None:
        raise NotFoundException(detail=f"User with id [{user_id}] not found")

    try:
        db.add(TeacherCourse(teacher_id=user_id, course_id=course_id))
        db.commit()
    except exc.IntegrityError:
        db.rollback()
        raise ConflictException(detail="User is already a teacher of this course")

    logger.info(f"Added teacher {user_id} to course {course_id}")
    return get_course_detail(course_id, db).teachers


def remove_teacher(course_id: int, user_id: int, db: Session) -> List[CourseTeacher]:
    get_course_or_404(course_id, db)

    teacher = db.query(TeacherCourse).filter(
        TeacherCourse.course_id == course_id,
        TeacherCourse.teacher_id == user_id
    ).first()

    if teacher is None:
        raise NotFoundException(detail="User is not a teacher of this course")

    count = db.query(func.count(TeacherCourse.teacher_id)).filter(TeacherCourse.course_id == course_id).scalar()

    if count <= 1:
        raise ConflictException(detail="A course must keep at least one teacher")

    db.delete(teacher)
    db.commit()

    logger.info(f"Removed teacher {user_id} from course {course_id}")
    return get_course_detail(course_id, db).teachers


## Questions

def get_question_or_404(course_id: int, question_id: int, db: Session) -> CourseQuestion:
    question = db.query(CourseQuestion).filter(
        CourseQuestion.id == question_id,
        CourseQuestion.course_id == course_id
    ).first()

    if question is None:
        raise NotFoundException(detail=f"Question with id [{question_id}] not found in this course")

    return question


def list_questions(course_id: int, db: Session, with_solutions: bool = False) -> List[QuestionWithOptions]:
    course = get_course_or_404(course_id, db)

    response_type = QuestionWithOptionsTeacher if with_solutions else QuestionWithOptions

    return [response_type.model_validate(question, from_attributes=True) for question in course.questions]


def create_question(course_id: int, entity: QuestionCreate, db: Session) -> QuestionGet:
    get_course_or_404(course_id, db)

    question = CourseQuestion(question=entity.question, course_id=course_id)
    db.add(question)
    db.commit()
    db.refresh(question)

    return QuestionGet.model_validate(question, from_attributes=True)


def update_question(course_id: int, question_id: int, entity: QuestionUpdate, db: Session) -> QuestionGet:
    question = get_question_or_404(course_id, question_id, db)

    question.question = entity.question
    db.commit()
    db.refresh(question)

    return QuestionGet.model_validate(question, from_attributes=True)


def delete_question(course_id: int, question_id: int, db: Session):
    question = get_question_or_404(course_id, question_id, db)

    db.delete(question)
    db.commit()


## Answer options

def _get_option_or_404(course_id: int, option_id: int, db: Session) -> CourseAnswerOption:
    option = (
        db.query(CourseAnswerOption)
        .join(CourseQuestion, CourseQuestion.id == CourseAnswerOption.question_id)
        .filter(CourseAnswerOption.id == option_id, CourseQuestion.course_id == course_id)
        .first()
    )

    if option is None:
        raise NotFoundException(detail=f"Answer option with id [{option_id}] not found in this course")

    return option


def create_answer_option(course_id: int, entity: AnswerOptionCreate, db: Session) -> AnswerOptionGet:
    get_question_or_404(course_id, entity.question_id, db)

    option = CourseAnswerOption(**entity.model_dump())
    db.add(option)
    db.commit()
    db.refresh(option)

    return AnswerOptionGet.model_validate(option, from_attributes=True)


def update_answer_option(course_id: int, option_id: int, entity: AnswerOptionUpdate, db: Session) -> AnswerOptionGet:
    option = _get_option_or_404(course_id, option_id, db)

    for key, value in entity.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(option, key, value)

    db.commit()
    db.refresh(option)

    return AnswerOptionGet.model_validate(option, from_attributes=True)


def delete_answer_option(course_id: int, option_id: int, db: Session):
    option = _get_option_or_404(course_id, option_id, db)

    db.delete(option)
    db.commit()
