from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from .base import Base


class Role(Base):
    __tablename__ = 'roles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    key = Column(String(256), unique=True, nullable=False)
    description = Column(Text)
    assigned_on_signup = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    # Relationships
    permission_roles = relationship('PermissionRole', back_populates='role', cascade='all, delete-orphan', passive_deletes=True)
    role_users = relationship('RoleUser', back_populates='role', cascade='all', passive_deletes=True)


class Permission(Base):
    __tablename__ = 'permissions'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    key = Column(String(256), unique=True, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())

    permission_roles = relationship('PermissionRole', back_populates='permission', cascade='all', passive_deletes=True)


class RoleUser(Base):
    """A role granted to a user inside one organization."""
    __tablename__ = 'roles_to_users'

    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    role_id = Column(ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    organization_id = Column(ForeignKey('organizations.id', ondelete='CASCADE'), primary_key=True, nullable=False)

    role = relationship('Role', back_populates='role_users')
    user = relationship('User', back_populates='role_users')
    organization = relationship('Organization', back_populates='role_users')


class PermissionRole(Base):
    __tablename__ = 'permissions_to_roles'

    role_id = Column(ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True, nullable=False)
    permission_id = Column(ForeignKey('permissions.id', ondelete='CASCADE'), primary_key=True, nullable=False)

    role = relationship('Role', back_populates='permission_roles')
    permission = relationship('Permission', back_populates='permission_roles')
