"""
Tests for the system data initialization.
"""

from lms_backend.model.auth import User
from lms_backend.model.course import CourseCategory
from lms_backend.model.organization import Organization, UserOrganization
from lms_backend.model.role import Permission, PermissionRole, Role, RoleUser
from lms_backend.permissions.core import resolve_permissions
from lms_backend.scripts.initialize_system_data import PERMISSIONS, initialize_system_data
from lms_backend.services.sessions import verify_password
from lms_backend.tests.fixtures import ADMIN_EMAIL, ADMIN_PASSWORD

MODELS = [Organization, Permission, Role, PermissionRole, User, UserOrganization, RoleUser, CourseCategory]


def _counts(db):
    return {model.__name__: db.query(model).count() for model in MODELS}


class TestInitializeSystemData:

    def test_seeds_baseline(self, db):
        initialize_system_data(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")

        organization = db.query(Organization).one()
        assert organization.is_default
        assert organization.name == "Default Organization"

        assert {key for (key,) in db.query(Permission.key).all()} == set(PERMISSIONS)

        student = db.query(Role).filter(Role.key == "student").one()
        assert student.assigned_on_signup

        admin = db.query(User).filter(User.email == ADMIN_EMAIL).one()
        assert verify_password(ADMIN_PASSWORD, admin.password)
        assert resolve_permissions(admin.id, organization.id, db) == set(PERMISSIONS)

        assert db.query(CourseCategory).filter(CourseCategory.slug == "general").one()

    def test_running_twice_changes_nothing(self, db):
        initialize_system_data(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")
        before = _counts(db)

        initialize_system_data(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")

        assert _counts(db) == before

    def test_existing_default_organization_is_kept(self, db):
        db.add(Organization(name="Acme", is_default=True))
        db.commit()

        initialize_system_data(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")

        assert [o.name for o in db.query(Organization).all()] == ["Acme"]

    def test_without_admin_password(self, db):
        initialize_system_data(db, ADMIN_EMAIL, None, "Admin")

        assert db.query(User).count() == 0
        assert db.query(Role).count() == 3
