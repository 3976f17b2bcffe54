"""
Session store: opaque tokens mapped to users with a fixed expiry.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional
import bcrypt
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import BadRequestException, UnauthorizedException
from lms_backend.model.auth import User, Session as UserSession
from lms_backend.settings import settings
from lms_backend.utils import as_utc, utcnow

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise BadRequestException(detail=f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def resolve_user(session_token: Optional[str], db: Session) -> Optional[User]:
    """Return the user owning a live session, or None for anonymous requests.

    Missing, unknown and expired tokens all resolve to None; nothing is renewed.
    """
    if not session_token or not isinstance(session_token, str):
        return None

    session = (
        db.query(UserSession)
        .filter(UserSession.session_token == session_token)
        .first()
    )

    if session is None:
        return None

    if as_utc(session.expires_at) <= utcnow():
        logger.debug(f"Session for user {session.user_id} expired at {session.expires_at}")
        return None

    return session.user


def authenticate(email: str, password: str, db: Session) -> User:

    user = db.query(User).filter(User.email == email).first()

    if user is None or not verify_password(password, user.password):
        logger.info(f"Failed sign-in attempt for {email}")
        raise UnauthorizedException("Invalid credentials")

    return user


def create_session(user: User, db: Session) -> UserSession:

    session = UserSession(
        session_token=secrets.token_urlsafe(32),
        user_id=user.id,
        expires_at=utcnow() + timedelta(minutes=settings.SESSION_TTL_MINUTES)
    )

    db.add(session)
    db.commit()
    db.refresh(session)

    logger.info(f"Created session for user {user.id}")
    return session


def delete_session(session_token: str, db: Session):

    deleted = (
        db.query(UserSession)
        .filter(UserSession.session_token == session_token)
        .delete(synchronize_session=False)
    )
    db.commit()

    return deleted > 0
