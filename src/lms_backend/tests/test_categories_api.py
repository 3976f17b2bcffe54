"""
Tests for the category routes.
"""

import pytest

from lms_backend.model.course import Course
from lms_backend.tests.fixtures import ADMIN_EMAIL, ADMIN_PASSWORD, login


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


class TestCategories:

    def test_list_requires_session(self, client):
        assert client.get("/categories").status_code == 401

    def test_list(self, client, student_headers):
        response = client.get("/categories", headers=student_headers)

        assert response.status_code == 200
        assert [c["slug"] for c in response.json()] == ["general"]

    def test_create_update_delete(self, client, admin_headers):
        created = client.post("/categories", json={"name": "Computer Science"}, headers=admin_headers)
        assert created.status_code == 201
        assert created.json()["slug"] == "computer-science"

        category_id = created.json()["id"]

        updated = client.patch(f"/categories/{category_id}", json={"name": "Informatics"}, headers=admin_headers)
        assert updated.json() == {"id": category_id, "name": "Informatics", "slug": "informatics"}

        assert client.delete(f"/categories/{category_id}", headers=admin_headers).status_code == 204
        assert client.patch(f"/categories/{category_id}", json={"name": "Gone"}, headers=admin_headers).status_code == 404

    def test_duplicate_is_conflict(self, client, admin_headers):
        response = client.post("/categories", json={"name": "General"}, headers=admin_headers)
        assert response.status_code == 409

    def test_requires_write_categories(self, client, teacher_headers):
        assert client.post("/categories", json={"name": "Art"}, headers=teacher_headers).status_code == 403

    def test_delete_removes_courses(self, client, seeded_db, admin_headers, quiz, category):
        assert client.delete(f"/categories/{category.id}", headers=admin_headers).status_code == 204
        assert seeded_db.query(Course).filter(Course.id == quiz["course_id"]).first() is None
