from .base import Base, metadata
from .auth import User, Session
from .organization import Organization, UserOrganization
from .role import Role, Permission, RoleUser, PermissionRole
from .course import (
    CourseCategory,
    Course,
    CourseQuestion,
    CourseAnswerOption,
    TeacherCourse,
    StudentCourse,
    StudentAnswer
)

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'User',
    'Session',
    # Organization
    'Organization',
    'UserOrganization',
    # Role/Permission models
    'Role',
    'Permission',
    'RoleUser',
    'PermissionRole',
    # Course models
    'CourseCategory',
    'Course',
    'CourseQuestion',
    'CourseAnswerOption',
    'TeacherCourse',
    'StudentCourse',
    'StudentAnswer'
]
