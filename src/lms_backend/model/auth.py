from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
)
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    email = Column(String(320), unique=True, nullable=False)
    password = Column(Text)
    image = Column(Text)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    # Relationships
    sessions = relationship("Session", back_populates="user", uselist=True, lazy="select", cascade="all, delete-orphan", passive_deletes=True)
    user_organizations = relationship("UserOrganization", back_populates="user", uselist=True, lazy="select", cascade="all", passive_deletes=True)
    role_users = relationship("RoleUser", back_populates="user", uselist=True, lazy="select", cascade="all", passive_deletes=True)
    teacher_courses = relationship("TeacherCourse", back_populates="teacher", uselist=True, lazy="select", cascade="all", passive_deletes=True)
    student_courses = relationship("StudentCourse", back_populates="student", uselist=True, lazy="select", cascade="all", passive_deletes=True)


class Session(Base):
    __tablename__ = 'sessions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_token = Column(String(255), unique=True, nullable=False)
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    expires_at = Column(DateTime(True), nullable=False)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    user = relationship('User', back_populates='sessions')
