"""
Request authentication and the authorization guards used by the routers.

A guard resolves the session to a user, picks the organization context,
resolves the user's permissions there and rejects the request before any
handler logic runs when a required permission key is missing.
"""

import logging
from typing import Optional, Sequence
from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import (
    BadRequestException,
    InternalServerException,
    NotFoundException,
    UnauthorizedException,
)
from lms_backend.database import get_db
from lms_backend.model.course import Course
from lms_backend.model.organization import Organization
from lms_backend.permissions.cache import get_permission_resolver
from lms_backend.permissions.core import PermissionResolver, check_course_teacher, check_permissions
from lms_backend.permissions.principal import Principal
from lms_backend.services.organizations import get_default_organization
from lms_backend.services.sessions import resolve_user
from lms_backend.settings import settings

logger = logging.getLogger(__name__)

ORGANIZATION_HEADER = "X-Organization-Id"


def get_session_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the session cookie"""

    authorization = request.headers.get("Authorization")

    if authorization:
        scheme, param = get_authorization_scheme_param(authorization)
        if scheme.lower() == "bearer" and param:
            return param

    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_organization_context(request: Request, db: Session) -> Organization:

    requested = request.headers.get(ORGANIZATION_HEADER)

    if requested:
        try:
            organization_id = int(requested)
        except ValueError:
            raise BadRequestException(detail=f"Invalid {ORGANIZATION_HEADER} header")

        organization = db.query(Organization).filter(Organization.id == organization_id).first()

        if organization is None:
            raise NotFoundException(detail=f"Organization with id [{organization_id}] not found")

        return organization

    organization = get_default_organization(db)

    if organization is None:
        logger.error("No default organization found, has the database been seeded?")
        raise InternalServerException(detail="No default organization configured")

    return organization


async def require_permission(request: Request, keys: Sequence[str], db: Session, resolver: PermissionResolver) -> Principal:
    """
    Authenticate the request and require every key in `keys`.

    Raises UnauthorizedException without a live session and ForbiddenException
    when any key is missing. On success the user, organization id and principal
    are attached to `request.state`.
    """

    user = resolve_user(get_session_token(request), db)

    if user is None:
        raise UnauthorizedException("Not authenticated")

    organization = get_organization_context(request, db)

    permissions = await resolver.resolve(user.id, organization.id, db)

    principal = Principal(
        user_id=user.id,
        organization_id=organization.id,
        permissions=permissions
    )

    check_permissions(principal, keys)

    request.state.user = user
    request.state.organization_id = organization.id
    request.state.principal = principal

    return principal


def require_permissions(*keys: str):
    """Dependency factory; without keys it only requires a valid session"""

    async def guard(
        request: Request,
        db: Session = Depends(get_db),
        resolver: PermissionResolver = Depends(get_permission_resolver)
    ) -> Principal:
        return await require_permission(request, keys, db, resolver)

    return guard


def require_course_teacher(*keys: str):
    """Permission guard composed with the teacher-of-course ownership check on the `course_id` path parameter"""

    permission_guard = require_permissions(*keys)

    async def guard(
        course_id: int,
        principal: Principal = Depends(permission_guard),
        db: Session = Depends(get_db)
    ) -> Principal:

        if db.query(Course.id).filter(Course.id == course_id).first() is None:
            raise NotFoundException(detail=f"Course with id [{course_id}] not found")

        check_course_teacher(principal, course_id, db)

        return principal

    return guard


get_current_principal = require_permissions()
