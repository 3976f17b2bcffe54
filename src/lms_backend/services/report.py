from typing import List, Tuple
from sqlalchemy import and_
from sqlalchemy.orm import Session, aliased

from lms_backend.interface.enrollments import QuestionResult
from lms_backend.model.course import CourseAnswerOption, CourseQuestion, StudentAnswer


def compute_report(course_id: int, student_id: int, db: Session) -> List[QuestionResult]:
    """
    One result per question of the course, ordered by question id.
    Unanswered questions carry no answer and are never correct.
    """

    chosen = aliased(CourseAnswerOption)

    rows = (
        db.query(
            CourseQuestion.id.label("question_id"),
            CourseQuestion.question.label("question"),
            StudentAnswer.answer_id.label("answer_id"),
            chosen.value.label("answer"),
            chosen.is_correct.label("is_correct"),
        )
        .outerjoin(StudentAnswer, and_(
            StudentAnswer.question_id == CourseQuestion.id,
            StudentAnswer.student_id == student_id
        ))
        .outerjoin(chosen, chosen.id == StudentAnswer.answer_id)
        .filter(CourseQuestion.course_id == course_id)
        .order_by(CourseQuestion.id)
        .all()
    )

    return [
        QuestionResult(
            question_id=row.question_id,
            question=row.question,
            answer_id=row.answer_id,
            answer=row.answer,
            is_correct=bool(row.is_correct),
        )
        for row in rows
    ]


def summarize_report(results: List[QuestionResult]) -> Tuple[int, bool]:
    """Returns (score, is_passed); a course without questions passes with score 0"""

    score = sum(1 for result in results if result.is_correct)
    return score, all(result.is_correct for result in results)
