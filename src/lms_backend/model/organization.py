from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from .base import Base


class Organization(Base):
    __tablename__ = 'organizations'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    # Relationships
    user_organizations = relationship('UserOrganization', back_populates='organization', uselist=True, lazy='select', cascade='all', passive_deletes=True)
    role_users = relationship('RoleUser', back_populates='organization', uselist=True, lazy='select', cascade='all', passive_deletes=True)


class UserOrganization(Base):
    __tablename__ = 'users_to_organizations'

    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    organization_id = Column(ForeignKey('organizations.id', ondelete='CASCADE'), primary_key=True, nullable=False)

    user = relationship('User', back_populates='user_organizations')
    organization = relationship('Organization', back_populates='user_organizations')
