"""
Permission resolution and the two authorization predicates.

Permissions are purely additive: a user holds a key in an organization when
any role assigned to them in that organization grants it. Resource ownership
(being a teacher of a course) is checked separately and composed with the
permission check where a route needs both.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Set
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import ForbiddenException
from lms_backend.model.course import TeacherCourse
from lms_backend.model.role import Permission, PermissionRole, RoleUser
from lms_backend.permissions.principal import Principal

logger = logging.getLogger(__name__)


def resolve_permissions(user_id: int, organization_id: int, db: Session) -> Set[str]:
    """Union of the permission keys of every role assigned to the user in the organization"""

    values = (
        db.query(Permission.key)
        .select_from(RoleUser)
        .join(PermissionRole, PermissionRole.role_id == RoleUser.role_id)
        .join(Permission, Permission.id == PermissionRole.permission_id)
        .filter(
            RoleUser.user_id == user_id,
            RoleUser.organization_id == organization_id
        )
        .distinct()
        .all()
    )

    return {row[0] for row in values}


class PermissionResolver(ABC):
    """Maps (user, organization) to a set of permission keys.

    Implementations must return the same set for the same inputs within a request.
    """

    @abstractmethod
    async def resolve(self, user_id: int, organization_id: int, db: Session) -> Set[str]:
        pass

    async def invalidate(self, user_id: int, organization_id: int):
        pass


class DatabasePermissionResolver(PermissionResolver):
    """Queries the role assignments on every call"""

    async def resolve(self, user_id: int, organization_id: int, db: Session) -> Set[str]:
        return resolve_permissions(user_id, organization_id, db)


def has_permissions(principal: Principal, keys: Iterable[str]) -> bool:
    return principal.has_permissions(keys)


def check_permissions(principal: Principal, keys: Iterable[str]):
    missing = principal.missing_permissions(keys)

    if missing:
        logger.info(f"User {principal.user_id} lacks permissions {missing} in organization {principal.organization_id}")
        raise ForbiddenException(detail={"missing_permissions": missing})


def is_course_teacher(user_id: int, course_id: int, db: Session) -> bool:
    return (
        db.query(TeacherCourse)
        .filter(
            TeacherCourse.teacher_id == user_id,
            TeacherCourse.course_id == course_id
        )
        .first()
    ) is not None


def check_course_teacher(principal: Principal, course_id: int, db: Session):
    if not is_course_teacher(principal.get_user_id_or_throw(), course_id, db):
        raise ForbiddenException(detail="You are not the teacher of this course")
