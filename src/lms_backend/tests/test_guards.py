"""
Tests for the authorization guards as seen through the HTTP routes.
"""

from lms_backend.model.course import Course
from lms_backend.model.organization import Organization
from lms_backend.services.courses import add_teacher
from lms_backend.tests.fixtures import create_user, login


class TestAuthentication:

    def test_no_session_is_unauthorized(self, client):
        response = client.get("/courses")
        assert response.status_code == 401

    def test_invalid_token_is_unauthorized(self, client):
        response = client.get("/courses", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_cookie_session(self, client, student):
        client.post("/auth/login", json={"email": student.email, "password": "password123"})

        response = client.get("/auth/me")

        assert response.status_code == 200
        assert response.json()["user"]["id"] == student.id

    def test_logged_out_token_is_rejected(self, client, student_headers):
        assert client.post("/auth/logout", headers=student_headers).status_code == 204
        assert client.get("/courses", headers=student_headers).status_code == 401


class TestRequirePermission:

    def test_missing_key_is_forbidden(self, client, student_headers, category):
        response = client.post("/courses", json={"name": "Algebra", "category_id": category.id}, headers=student_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == {"missing_permissions": ["write:courses"]}

    def test_all_keys_are_required(self, client, teacher_headers):
        # teachers may write courses but not categories
        response = client.post("/categories", json={"name": "Science"}, headers=teacher_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == {"missing_permissions": ["write:categories"]}

    def test_permission_held(self, client, teacher_headers, category):
        response = client.post("/courses", json={"name": "Algebra", "category_id": category.id}, headers=teacher_headers)
        assert response.status_code == 201

    def test_forbidden_request_has_no_side_effects(self, client, seeded_db, student_headers, category):
        client.post("/courses", json={"name": "Algebra", "category_id": category.id}, headers=student_headers)

        assert seeded_db.query(Course).filter(Course.slug == "algebra").first() is None


class TestOrganizationContext:

    def test_unknown_organization_header(self, client, teacher_headers):
        response = client.get("/courses", headers={**teacher_headers, "X-Organization-Id": "999"})
        assert response.status_code == 404

    def test_malformed_organization_header(self, client, teacher_headers):
        response = client.get("/courses", headers={**teacher_headers, "X-Organization-Id": "abc"})
        assert response.status_code == 400

    def test_roles_do_not_leak_across_organizations(self, client, seeded_db, teacher_headers, category):
        other = Organization(name="Other", is_default=False)
        seeded_db.add(other)
        seeded_db.commit()

        response = client.post(
            "/courses",
            json={"name": "Algebra", "category_id": category.id},
            headers={**teacher_headers, "X-Organization-Id": str(other.id)}
        )

        assert response.status_code == 403

    def test_me_reports_permissions(self, client, teacher_headers):
        response = client.get("/auth/me", headers=teacher_headers)

        assert response.status_code == 200
        assert response.json()["permissions"] == ["write:courses"]


class TestCourseOwnership:

    def test_other_teacher_is_forbidden(self, client, seeded_db, quiz):
        create_user(seeded_db, "Other Teacher", "other@school.org", ["teacher"])
        headers = login(client, "other@school.org")

        response = client.patch(f"/courses/{quiz['course_id']}", json={"name": "Hijacked"}, headers=headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "You are not the teacher of this course"

    def test_owner_without_permission_is_forbidden(self, client, seeded_db, quiz, teacher, student):
        add_teacher(quiz["course_id"], student.id, seeded_db)
        headers = login(client, student.email)

        response = client.patch(f"/courses/{quiz['course_id']}", json={"name": "Renamed"}, headers=headers)

        assert response.status_code == 403

    def test_owner_with_permission(self, client, quiz, teacher_headers):
        response = client.patch(f"/courses/{quiz['course_id']}", json={"name": "Intro to Python 2"}, headers=teacher_headers)

        assert response.status_code == 200
        assert response.json()["slug"] == "intro-to-python-2"

    def test_unknown_course_is_not_found(self, client, teacher_headers):
        response = client.patch("/courses/999", json={"name": "Nothing"}, headers=teacher_headers)
        assert response.status_code == 404
