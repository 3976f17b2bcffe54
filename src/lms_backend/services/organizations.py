from typing import List, Optional
from sqlalchemy.orm import Session

from lms_backend.model.organization import Organization, UserOrganization
from lms_backend.model.role import Role, RoleUser


def get_default_organization(db: Session) -> Optional[Organization]:
    return (
        db.query(Organization)
        .filter(Organization.is_default == True)
        .order_by(Organization.id)
        .first()
    )


def add_user_to_organization(user_id: int, organization_id: int, db: Session):
    """Idempotent; the caller commits"""

    exists = db.query(UserOrganization).filter(
        UserOrganization.user_id == user_id,
        UserOrganization.organization_id == organization_id
    ).first()

    if exists is None:
        db.add(UserOrganization(user_id=user_id, organization_id=organization_id))


def assign_role(user_id: int, role_id: int, organization_id: int, db: Session):
    """Idempotent; the caller commits"""

    exists = db.query(RoleUser).filter(
        RoleUser.user_id == user_id,
        RoleUser.role_id == role_id,
        RoleUser.organization_id == organization_id
    ).first()

    if exists is None:
        db.add(RoleUser(user_id=user_id, role_id=role_id, organization_id=organization_id))


def get_signup_roles(db: Session) -> List[Role]:
    return db.query(Role).filter(Role.assigned_on_signup == True).order_by(Role.id).all()
