"""
OrganizationUser Entity

Links a User to an Organization with a type (role).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import OrganizationUserStatus, OrganizationUserType


class OrganizationUser(SQLModel, table=True):
    """
    OrganizationUser entity - a member seat inside an organization.

    Business Rules:
    - (organization_id, user_id) must be unique
    - Only confirmed members can sponsor another organization
    - Each member sponsors independently of the others
    """

    __tablename__ = "organization_users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)
    email: str = Field(max_length=255)

    type: OrganizationUserType = Field(default=OrganizationUserType.user)
    status: OrganizationUserStatus = Field(default=OrganizationUserStatus.confirmed)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index(
            "idx_organization_user_org_user", "organization_id", "user_id", unique=True
        ),
        Index("idx_organization_user_type", "organization_id", "type"),
    )
