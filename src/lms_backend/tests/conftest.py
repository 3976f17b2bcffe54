"""
Pytest configuration and fixtures for all tests.

Tests run against an in-memory SQLite database shared through a StaticPool,
seeded with the system data before each test.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["PERMISSION_CACHE_TTL"] = "0"
os.environ["DEBUG_MODE"] = "testing"

from typing import Dict, Generator
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lms_backend.database import enable_sqlite_foreign_keys, get_db
from lms_backend.model.auth import User
from lms_backend.model.base import Base
from lms_backend.model.course import CourseCategory
from lms_backend.permissions.cache import get_permission_resolver
from lms_backend.permissions.core import DatabasePermissionResolver
from lms_backend.scripts.initialize_system_data import initialize_system_data
from lms_backend.server import app
from lms_backend.tests.fixtures import ADMIN_EMAIL, ADMIN_PASSWORD, build_course, create_user, login


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    Base.metadata.create_all(bind=engine)

    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    """Empty database session"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """Database session with the default organization, roles, permissions and admin user"""
    initialize_system_data(db, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")
    return db


@pytest.fixture
def client(seeded_db: Session) -> Generator[TestClient, None, None]:

    def override_get_db():
        yield seeded_db

    async def override_get_permission_resolver():
        return DatabasePermissionResolver()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_permission_resolver] = override_get_permission_resolver

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def category(seeded_db: Session) -> CourseCategory:
    return seeded_db.query(CourseCategory).filter(CourseCategory.slug == "general").one()


@pytest.fixture
def teacher(seeded_db: Session) -> User:
    return create_user(seeded_db, "Tina Teacher", "teacher@school.org", ["teacher"])


@pytest.fixture
def student(seeded_db: Session) -> User:
    return create_user(seeded_db, "Sam Student", "student@school.org")


@pytest.fixture
def teacher_headers(client: TestClient, teacher: User) -> Dict[str, str]:
    return login(client, teacher.email)


@pytest.fixture
def student_headers(client: TestClient, student: User) -> Dict[str, str]:
    return login(client, student.email)


@pytest.fixture
def quiz(seeded_db: Session, teacher: User, category: CourseCategory) -> Dict:
    """Three questions; the first option of each is the correct one"""
    return build_course(seeded_db, teacher.id, category.id, "Intro to Python", [
        ("What does len([1, 2]) return?", [("2", True), ("1", False), ("3", False)]),
        ("Which keyword defines a function?", [("def", True), ("func", False)]),
        ("Is a tuple mutable?", [("No", True), ("Yes", False)]),
    ])
