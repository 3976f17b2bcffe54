"""
Initialize system data: the default organization, permission keys, the
built-in roles, the admin user and a first course category.

Every step looks up what already exists first, so running the script again
leaves the database unchanged.
"""

import logging
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from lms_backend.database import get_db
from lms_backend.model.auth import User
from lms_backend.model.course import CourseCategory
from lms_backend.model.organization import Organization
from lms_backend.model.role import Permission, PermissionRole, Role
from lms_backend.services.organizations import add_user_to_organization, assign_role, get_default_organization
from lms_backend.services.sessions import hash_password
from lms_backend.settings import settings
from lms_backend.utils import slugify

logger = logging.getLogger(__name__)

DEFAULT_ORGANIZATION_NAME = "Default Organization"
DEFAULT_CATEGORY_NAME = "General"

PERMISSIONS = {
    "read:users": "Read users",
    "write:users": "Write users",
    "read:roles": "Read roles",
    "write:roles": "Write roles",
    "read:permissions": "Read permissions",
    "write:permissions": "Write permissions",
    "read:organizations": "Read organizations",
    "write:organizations": "Write organizations",
    "write:courses": "Write courses",
    "write:categories": "Write categories",
}

SUPER_ADMIN_ROLE = "super-admin"
TEACHER_ROLE = "teacher"
STUDENT_ROLE = "student"


def initialize_default_organization(db: Session) -> Organization:
    organization = get_default_organization(db)

    if organization is None:
        organization = Organization(name=DEFAULT_ORGANIZATION_NAME, is_default=True)
        db.add(organization)
        db.flush()
        logger.info(f"Created default organization {organization.id}")

    return organization


def initialize_permissions(db: Session) -> Dict[str, Permission]:
    existing = {permission.key: permission for permission in db.query(Permission).all()}

    for key, name in PERMISSIONS.items():
        if key not in existing:
            permission = Permission(key=key, name=name)
            db.add(permission)
            existing[key] = permission
            logger.info(f"Created permission {key}")

    db.flush()
    return existing


def initialize_role(db: Session, key: str, name: str, permissions: List[Permission], description: Optional[str] = None, assigned_on_signup: bool = False) -> Role:
    role = db.query(Role).filter(Role.key == key).first()

    if role is None:
        role = Role(key=key, name=name, description=description, assigned_on_signup=assigned_on_signup)
        db.add(role)
        db.flush()
        logger.info(f"Created role {key}")

    granted = {
        permission_id for (permission_id,) in
        db.query(PermissionRole.permission_id).filter(PermissionRole.role_id == role.id).all()
    }

    for permission in permissions:
        if permission.id not in granted:
            db.add(PermissionRole(role_id=role.id, permission_id=permission.id))
            logger.info(f"Granted {permission.key} to role {key}")

    db.flush()
    return role


def initialize_admin_user(db: Session, organization: Organization, role: Role, email: str, password: Optional[str], name: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()

    if user is None:
        if not password:
            logger.warning(f"No admin password configured, skipping creation of admin user {email}")
            return None

        user = User(name=name, email=email, password=hash_password(password), is_email_verified=True)
        db.add(user)
        db.flush()
        logger.info(f"Created admin user {email}")

    add_user_to_organization(user.id, organization.id, db)
    assign_role(user.id, role.id, organization.id, db)
    db.flush()

    return user


def initialize_default_category(db: Session) -> CourseCategory:
    slug = slugify(DEFAULT_CATEGORY_NAME)
    category = db.query(CourseCategory).filter(CourseCategory.slug == slug).first()

    if category is None:
        category = CourseCategory(name=DEFAULT_CATEGORY_NAME, slug=slug)
        db.add(category)
        db.flush()
        logger.info(f"Created category {slug}")

    return category


def initialize_system_data(db: Session, admin_email: str, admin_password: Optional[str], admin_name: str = "Admin"):
    """Seed everything in dependency order within one transaction"""

    try:
        organization = initialize_default_organization(db)
        permissions = initialize_permissions(db)

        super_admin = initialize_role(
            db, SUPER_ADMIN_ROLE, "Super Admin",
            list(permissions.values()),
            description="Holds every permission"
        )
        initialize_role(
            db, TEACHER_ROLE, "Teacher",
            [permissions["write:courses"]],
            description="Creates and manages own courses"
        )
        initialize_role(
            db, STUDENT_ROLE, "Student",
            [],
            description="Joins courses and takes their tests",
            assigned_on_signup=True
        )

        initialize_admin_user(db, organization, super_admin, admin_email, admin_password, admin_name)
        initialize_default_category(db)

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("System data initialized")


def main():
    with next(get_db()) as db:
        initialize_system_data(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_NAME)


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    main()
