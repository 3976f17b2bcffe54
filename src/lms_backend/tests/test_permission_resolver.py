"""
Tests for resolving permission keys from role assignments, with and without the cache.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from aiocache import Cache

from lms_backend.model.organization import Organization
from lms_backend.model.role import Permission, PermissionRole, Role
from lms_backend.permissions.cache import CachedPermissionResolver
from lms_backend.permissions.core import DatabasePermissionResolver, is_course_teacher, resolve_permissions
from lms_backend.services.organizations import assign_role, get_default_organization
from lms_backend.model.auth import User
from lms_backend.tests.fixtures import ADMIN_EMAIL, create_user


def _role(db, key, permission_keys):
    role = Role(key=key, name=key.title())
    db.add(role)
    db.flush()
    for permission in db.query(Permission).filter(Permission.key.in_(permission_keys)).all():
        db.add(PermissionRole(role_id=role.id, permission_id=permission.id))
    db.commit()
    return role


class TestResolvePermissions:

    def test_user_without_roles_has_no_permissions(self, seeded_db, student):
        organization = get_default_organization(seeded_db)
        assert resolve_permissions(student.id, organization.id, seeded_db) == set()

    def test_union_over_roles(self, seeded_db):
        organization = get_default_organization(seeded_db)
        user = create_user(seeded_db, "Multi", "multi@school.org", ["teacher"])

        reader = _role(seeded_db, "reader", ["read:users", "write:courses"])
        assign_role(user.id, reader.id, organization.id, seeded_db)
        seeded_db.commit()

        assert resolve_permissions(user.id, organization.id, seeded_db) == {"write:courses", "read:users"}

    def test_roles_are_scoped_to_organization(self, seeded_db, teacher):
        other = Organization(name="Other", is_default=False)
        seeded_db.add(other)
        seeded_db.commit()

        assert resolve_permissions(teacher.id, other.id, seeded_db) == set()

        default = get_default_organization(seeded_db)
        assert resolve_permissions(teacher.id, default.id, seeded_db) == {"write:courses"}

    def test_super_admin_holds_every_key(self, seeded_db):

        admin = seeded_db.query(User).filter(User.email == ADMIN_EMAIL).one()
        organization = get_default_organization(seeded_db)

        keys = {key for (key,) in seeded_db.query(Permission.key).all()}
        assert resolve_permissions(admin.id, organization.id, seeded_db) == keys

    @pytest.mark.asyncio
    async def test_database_resolver(self, seeded_db, teacher):
        organization = get_default_organization(seeded_db)
        resolver = DatabasePermissionResolver()

        assert await resolver.resolve(teacher.id, organization.id, seeded_db) == {"write:courses"}


class TestCourseTeacher:

    def test_creator_is_teacher(self, seeded_db, teacher, student, quiz):
        assert is_course_teacher(teacher.id, quiz["course_id"], seeded_db)
        assert not is_course_teacher(student.id, quiz["course_id"], seeded_db)


class TestCachedPermissionResolver:

    @pytest.mark.asyncio
    async def test_repeated_lookups_are_served_from_cache(self):
        inner = MagicMock()
        inner.resolve = AsyncMock(return_value={"write:courses"})

        resolver = CachedPermissionResolver(inner, Cache(Cache.MEMORY), ttl_seconds=60)

        assert await resolver.resolve(1, 1, None) == {"write:courses"}
        assert await resolver.resolve(1, 1, None) == {"write:courses"}

        inner.resolve.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_keys_are_per_user_and_organization(self):
        inner = MagicMock()
        inner.resolve = AsyncMock(side_effect=[{"a"}, {"b"}])

        resolver = CachedPermissionResolver(inner, Cache(Cache.MEMORY), ttl_seconds=60)

        assert await resolver.resolve(1, 1, None) == {"a"}
        assert await resolver.resolve(1, 2, None) == {"b"}
        assert inner.resolve.await_count == 2

    @pytest.mark.asyncio
    async def test_invalidate_forces_lookup(self):
        inner = MagicMock()
        inner.resolve = AsyncMock(side_effect=[{"a"}, {"a", "b"}])

        resolver = CachedPermissionResolver(inner, Cache(Cache.MEMORY), ttl_seconds=60)

        await resolver.resolve(1, 1, None)
        await resolver.invalidate(1, 1)

        assert await resolver.resolve(1, 1, None) == {"a", "b"}

    @pytest.mark.asyncio
    async def test_cache_failure_falls_back_to_resolver(self):
        inner = MagicMock()
        inner.resolve = AsyncMock(return_value={"a"})

        cache = MagicMock()
        cache.get = AsyncMock(side_effect=ConnectionError("redis down"))
        cache.set = AsyncMock(side_effect=ConnectionError("redis down"))

        resolver = CachedPermissionResolver(inner, cache)

        assert await resolver.resolve(1, 1, None) == {"a"}
