from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, func
)
from sqlalchemy.orm import relationship

from .base import Base


class CourseCategory(Base):
    __tablename__ = 'course_categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    slug = Column(String(256), unique=True, nullable=False)

    courses = relationship('Course', back_populates='category', cascade='all', passive_deletes=True)


class Course(Base):
    __tablename__ = 'courses'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    slug = Column(String(256), unique=True, nullable=False)
    image = Column(Text)
    category_id = Column(ForeignKey('course_categories.id', ondelete='CASCADE'), nullable=False, index=True)
    test_duration = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now(), onupdate=func.now())
    published_at = Column(DateTime(True), nullable=False, server_default=func.now())

    # Relationships
    category = relationship('CourseCategory', back_populates='courses')
    questions = relationship('CourseQuestion', back_populates='course', uselist=True, lazy='select', cascade='all', passive_deletes=True, order_by='CourseQuestion.id')
    teacher_courses = relationship('TeacherCourse', back_populates='course', uselist=True, lazy='select', cascade='all', passive_deletes=True)
    student_courses = relationship('StudentCourse', back_populates='course', uselist=True, lazy='select', cascade='all', passive_deletes=True)


class CourseQuestion(Base):
    __tablename__ = 'course_questions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    question = Column(Text, nullable=False)
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True)

    course = relationship('Course', back_populates='questions')
    answer_options = relationship('CourseAnswerOption', back_populates='question', uselist=True, lazy='select', cascade='all', passive_deletes=True, order_by='CourseAnswerOption.id')


class CourseAnswerOption(Base):
    __tablename__ = 'course_answer_options'

    id = Column(Integer, primary_key=True, autoincrement=True)
    value = Column(Text, nullable=False)
    question_id = Column(ForeignKey('course_questions.id', ondelete='CASCADE'), nullable=False, index=True)
    is_correct = Column(Boolean, nullable=False, default=False)

    question = relationship('CourseQuestion', back_populates='answer_options')


class TeacherCourse(Base):
    __tablename__ = 'teachers_to_courses'

    teacher_id = Column(ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), primary_key=True, nullable=False)

    teacher = relationship('User', back_populates='teacher_courses')
    course = relationship('Course', back_populates='teacher_courses')


class StudentCourse(Base):
    """Enrollment of a student in a course and the progress of its test."""
    __tablename__ = 'students_to_courses'

    student_id = Column(ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    joined_at = Column(DateTime(True), nullable=False, server_default=func.now())
    started_at = Column(DateTime(True))
    finished_at = Column(DateTime(True))
    is_passed = Column(Boolean)
    score = Column(Integer)

    student = relationship('User', back_populates='student_courses')
    course = relationship('Course', back_populates='student_courses')


class StudentAnswer(Base):
    __tablename__ = 'students_to_answers'

    student_id = Column(ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    question_id = Column(ForeignKey('course_questions.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    answer_id = Column(ForeignKey('course_answer_options.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now())
