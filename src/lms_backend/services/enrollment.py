"""
Course test lifecycle of a student: join, start, answer, finish.

Every transition moves forward only. Start and finish are conditional
updates so that two concurrent requests can not both succeed, and answers
are written with the store's upsert primitive.
"""

import logging
from typing import List, Optional
from sqlalchemy import exc
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import (
    AlreadyFinishedException,
    AlreadyStartedException,
    ConflictException,
    InvalidAnswerException,
    NotFoundException,
    NotFinishedException,
    NotJoinedException,
    NotStartedException,
)
from lms_backend.interface.enrollments import (
    EnrollmentGet,
    EnrollmentState,
    Report,
    StudentAnswerGet,
)
from lms_backend.model.course import (
    Course,
    CourseAnswerOption,
    CourseQuestion,
    StudentAnswer,
    StudentCourse,
)
from lms_backend.services.report import compute_report, summarize_report
from lms_backend.utils import as_utc, utcnow

logger = logging.getLogger(__name__)


def _get_course_or_404(course_id: int, db: Session) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if course is None:
        raise NotFoundException(detail="Course not found")
    return course


def get_enrollment(student_id: int, course_id: int, db: Session) -> Optional[StudentCourse]:
    return db.query(StudentCourse).filter(
        StudentCourse.student_id == student_id,
        StudentCourse.course_id == course_id
    ).first()


def enrollment_state(enrollment: Optional[StudentCourse]) -> EnrollmentState:
    if enrollment is None:
        return EnrollmentState.not_joined
    if enrollment.finished_at is not None:
        return EnrollmentState.finished
    if enrollment.started_at is not None:
        return EnrollmentState.started
    return EnrollmentState.joined


def get_enrollment_state(student_id: int, course_id: int, db: Session) -> EnrollmentState:
    return enrollment_state(get_enrollment(student_id, course_id, db))


def remaining_seconds(enrollment: Optional[StudentCourse], course: Course) -> Optional[float]:
    """Seconds left of the test duration, None when untimed or not running"""

    if enrollment is None or not course.test_duration or course.test_duration <= 0:
        return None
    if enrollment.started_at is None or enrollment.finished_at is not None:
        return None

    elapsed = (utcnow() - as_utc(enrollment.started_at)).total_seconds()
    return max(0.0, course.test_duration * 60 - elapsed)


def describe_enrollment(student_id: int, course_id: int, db: Session) -> EnrollmentGet:
    course = _get_course_or_404(course_id, db)
    enrollment = get_enrollment(student_id, course_id, db)

    if enrollment is None:
        return EnrollmentGet(student_id=student_id, course_id=course_id, state=EnrollmentState.not_joined)

    return EnrollmentGet(
        student_id=enrollment.student_id,
        course_id=enrollment.course_id,
        joined_at=enrollment.joined_at,
        started_at=enrollment.started_at,
        finished_at=enrollment.finished_at,
        is_passed=enrollment.is_passed,
        score=enrollment.score,
        state=enrollment_state(enrollment),
        remaining_seconds=remaining_seconds(enrollment, course),
    )


def join_course(student_id: int, course_id: int, db: Session) -> EnrollmentGet:
    _get_course_or_404(course_id, db)

    if get_enrollment(student_id, course_id, db) is not None:
        raise ConflictException(detail="You already joined this course")

    try:
        db.add(StudentCourse(student_id=student_id, course_id=course_id, joined_at=utcnow()))
        db.commit()
    except exc.IntegrityError:
        db.rollback()
        raise ConflictException(detail="You already joined this course")

    logger.info(f"User {student_id} joined course {course_id}")
    return describe_enrollment(student_id, course_id, db)


def start_course(student_id: int, course_id: int, db: Session) -> EnrollmentGet:
    _get_course_or_404(course_id, db)

    state = get_enrollment_state(student_id, course_id, db)

    if state == EnrollmentState.not_joined:
        raise NotJoinedException()
    if state != EnrollmentState.joined:
        raise AlreadyStartedException()

    updated = db.query(StudentCourse).filter(
        StudentCourse.student_id == student_id,
        StudentCourse.course_id == course_id,
        StudentCourse.started_at.is_(None)
    ).update({StudentCourse.started_at: utcnow()}, synchronize_session=False)

    if updated == 0:
        db.rollback()
        raise AlreadyStartedException()

    db.commit()
    db.expire_all()

    logger.info(f"User {student_id} started course {course_id}")
    return describe_enrollment(student_id, course_id, db)


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name

    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert

    raise NotImplementedError(f"Answer upsert is not supported on {dialect}")


def answer_question(student_id: int, course_id: int, question_id: int, answer_id: int, db: Session) -> StudentAnswerGet:
    _get_course_or_404(course_id, db)

    state = get_enrollment_state(student_id, course_id, db)

    if state == EnrollmentState.not_joined:
        raise NotJoinedException()
    if state == EnrollmentState.joined:
        raise NotStartedException()
    if state == EnrollmentState.finished:
        raise AlreadyFinishedException()

    question = db.query(CourseQuestion).filter(
        CourseQuestion.id == question_id,
        CourseQuestion.course_id == course_id
    ).first()

    if question is None:
        raise NotFoundException(detail="Question not found in this course")

    option = db.query(CourseAnswerOption).filter(
        CourseAnswerOption.id == answer_id,
        CourseAnswerOption.question_id == question_id
    ).first()

    if option is None:
        raise InvalidAnswerException()

    now = utcnow()
    insert = _insert_for(db)

    stmt = insert(StudentAnswer).values(
        student_id=student_id,
        question_id=question_id,
        answer_id=answer_id,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["student_id", "question_id"],
        set_={"answer_id": stmt.excluded.answer_id, "updated_at": stmt.excluded.updated_at}
    )

    try:
        db.execute(stmt)
        db.commit()
    except exc.IntegrityError as e:
        db.rollback()
        logger.warning(f"Answer of user {student_id} to question {question_id} rejected: {e.orig}")
        raise InvalidAnswerException()

    return StudentAnswerGet(
        question_id=question.id,
        question=question.question,
        answer_id=option.id,
        answer=option.value,
        updated_at=now,
    )


def finish_course(student_id: int, course_id: int, db: Session) -> EnrollmentGet:
    _get_course_or_404(course_id, db)

    state = get_enrollment_state(student_id, course_id, db)

    if state == EnrollmentState.not_joined:
        raise NotJoinedException()
    if state == EnrollmentState.joined:
        raise NotStartedException()
    if state == EnrollmentState.finished:
        raise AlreadyFinishedException()

    try:
        score, is_passed = summarize_report(compute_report(course_id, student_id, db))

        updated = db.query(StudentCourse).filter(
            StudentCourse.student_id == student_id,
            StudentCourse.course_id == course_id,
            StudentCourse.started_at.isnot(None),
            StudentCourse.finished_at.is_(None)
        ).update({
            StudentCourse.finished_at: utcnow(),
            StudentCourse.is_passed: is_passed,
            StudentCourse.score: score,
        }, synchronize_session=False)

        if updated == 0:
            raise AlreadyFinishedException()

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire_all()

    logger.info(f"User {student_id} finished course {course_id} with score {score} (passed={is_passed})")
    return describe_enrollment(student_id, course_id, db)


def get_report(student_id: int, course_id: int, db: Session) -> Report:
    _get_course_or_404(course_id, db)

    enrollment = get_enrollment(student_id, course_id, db)

    if enrollment is None:
        raise NotJoinedException()

    if enrollment.finished_at is None:
        raise NotFinishedException()

    # score and pass flag are the ones recorded at finish
    results = compute_report(course_id, student_id, db)

    return Report(
        course_id=course_id,
        student_id=student_id,
        results=results,
        total_questions=len(results),
        score=enrollment.score,
        is_passed=enrollment.is_passed,
        finished_at=enrollment.finished_at,
    )


def list_student_answers(student_id: int, course_id: int, db: Session) -> List[StudentAnswerGet]:
    _get_course_or_404(course_id, db)

    rows = (
        db.query(
            CourseQuestion.id.label("question_id"),
            CourseQuestion.question.label("question"),
            CourseAnswerOption.id.label("answer_id"),
            CourseAnswerOption.value.label("answer"),
            StudentAnswer.updated_at.label("updated_at"),
        )
        .select_from(StudentAnswer)
        .join(CourseQuestion, CourseQuestion.id == StudentAnswer.question_id)
        .join(CourseAnswerOption, CourseAnswerOption.id == StudentAnswer.answer_id)
        .filter(StudentAnswer.student_id == student_id, CourseQuestion.course_id == course_id)
        .order_by(CourseQuestion.id)
        .all()
    )

    return [StudentAnswerGet(**row._mapping) for row in rows]
