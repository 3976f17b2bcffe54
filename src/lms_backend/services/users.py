import logging
from sqlalchemy import exc
from sqlalchemy.orm import Session

from lms_backend.api.exceptions import ConflictException, InternalServerException
from lms_backend.model.auth import User
from lms_backend.services.organizations import (
    add_user_to_organization,
    assign_role,
    get_default_organization,
    get_signup_roles,
)
from lms_backend.services.sessions import hash_password

logger = logging.getLogger(__name__)


def signup(name: str, email: str, password: str, db: Session) -> User:
    """Create a user, add them to the default organization and grant the sign-up roles there"""

    organization = get_default_organization(db)

    if organization is None:
        logger.error("Sign-up attempted before the default organization was seeded")
        raise InternalServerException(detail="No default organization configured")

    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ConflictException(detail="A user with this email already exists")

    try:
        user = User(name=name, email=email, password=hash_password(password))
        db.add(user)
        db.flush()

        add_user_to_organization(user.id, organization.id, db)

        for role in get_signup_roles(db):
            assign_role(user.id, role.id, organization.id, db)

        db.commit()
        db.refresh(user)
    except exc.IntegrityError:
        db.rollback()
        raise ConflictException(detail="A user with this email already exists")

    logger.info(f"Signed up user {user.id}")
    return user
