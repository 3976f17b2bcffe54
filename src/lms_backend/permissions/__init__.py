"""
Permission system: principals, permission resolution, caching and the
request guards built on top of them.
"""

from .principal import Principal

from .core import (
    PermissionResolver,
    DatabasePermissionResolver,
    resolve_permissions,
    has_permissions,
    check_permissions,
    is_course_teacher,
    check_course_teacher,
)

from .cache import (
    CachedPermissionResolver,
    get_permission_resolver,
)

from .auth import (
    get_current_principal,
    get_session_token,
    get_organization_context,
    require_permission,
    require_permissions,
    require_course_teacher,
)

__all__ = [
    "Principal",
    "PermissionResolver",
    "DatabasePermissionResolver",
    "CachedPermissionResolver",
    "resolve_permissions",
    "has_permissions",
    "check_permissions",
    "is_course_teacher",
    "check_course_teacher",
    "get_permission_resolver",
    "get_current_principal",
    "get_session_token",
    "get_organization_context",
    "require_permission",
    "require_permissions",
    "require_course_teacher",
]
