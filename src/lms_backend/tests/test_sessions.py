"""
Tests for the session store and password handling.
"""

from datetime import timedelta
import pytest

from lms_backend.api.exceptions import BadRequestException, UnauthorizedException
from lms_backend.model.auth import Session as UserSession
from lms_backend.services.sessions import (
    authenticate,
    create_session,
    delete_session,
    hash_password,
    resolve_user,
    verify_password,
)
from lms_backend.tests.fixtures import PASSWORD
from lms_backend.utils import utcnow


class TestPasswords:

    def test_hash_and_verify(self):
        password_hash = hash_password("correct horse")

        assert password_hash != "correct horse"
        assert verify_password("correct horse", password_hash)
        assert not verify_password("wrong horse", password_hash)

    def test_missing_hash_never_verifies(self):
        assert not verify_password("anything", None)
        assert not verify_password("anything", "")

    def test_password_over_72_bytes_rejected(self):
        with pytest.raises(BadRequestException):
            hash_password("x" * 73)


class TestResolveUser:

    def test_valid_session(self, seeded_db, student):
        session = create_session(student, seeded_db)

        assert resolve_user(session.session_token, seeded_db).id == student.id

    @pytest.mark.parametrize("token", [None, "", "not-a-token", 12345])
    def test_missing_or_unknown_token_is_anonymous(self, seeded_db, token):
        assert resolve_user(token, seeded_db) is None

    def test_expired_session_is_anonymous(self, seeded_db, student):
        session = create_session(student, seeded_db)
        session.expires_at = utcnow() - timedelta(seconds=1)
        seeded_db.commit()

        assert resolve_user(session.session_token, seeded_db) is None

    def test_tokens_are_unique(self, seeded_db, student):
        first = create_session(student, seeded_db)
        second = create_session(student, seeded_db)

        assert first.session_token != second.session_token
        assert resolve_user(second.session_token, seeded_db).id == student.id


class TestAuthenticate:

    def test_valid_credentials(self, seeded_db, student):
        assert authenticate(student.email, PASSWORD, seeded_db).id == student.id

    def test_wrong_password(self, seeded_db, student):
        with pytest.raises(UnauthorizedException):
            authenticate(student.email, "wrong-password", seeded_db)

    def test_unknown_email(self, seeded_db):
        with pytest.raises(UnauthorizedException):
            authenticate("nobody@school.org", PASSWORD, seeded_db)


class TestDeleteSession:

    def test_logout_invalidates_token(self, seeded_db, student):
        session = create_session(student, seeded_db)
        token = session.session_token

        assert delete_session(token, seeded_db)
        assert resolve_user(token, seeded_db) is None
        assert seeded_db.query(UserSession).filter(UserSession.session_token == token).first() is None

    def test_unknown_token(self, seeded_db):
        assert not delete_session("missing", seeded_db)
