"""
Sponsorship Entity

The offered/active/terminated discount relationship between a sponsoring
and a sponsored organization.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import (
    PENDING_SPONSORSHIP_STATUSES,
    TERMINAL_SPONSORSHIP_STATUSES,
    PlanSponsorshipType,
    SponsorshipStatus,
)

_NON_TERMINAL_ROWS = "status NOT IN ('revoked', 'removed')"


class Sponsorship(SQLModel, table=True):
    """
    Sponsorship entity - one sponsoring member's offer to another organization.

    Business Rules:
    - At most one non-terminal sponsorship per sponsoring member and per
      sponsored organization
    - sponsored_organization_id is set once, on redemption
    - Token material (redemption_token_id, redemption_token_expires_at) is
      regenerated on offer/resend and cleared on redemption or termination
    - Revoked/removed rows are kept with to_delete set until an external
      cleanup job deletes them
    - version is bumped on every update (compare-and-swap in the repository)
    """

    __tablename__ = "sponsorships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    sponsoring_organization_id: UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    sponsoring_organization_user_id: UUID = Field(
        foreign_key="organization_users.id", nullable=False
    )
    sponsored_organization_id: Optional[UUID] = Field(
        default=None, foreign_key="organizations.id", index=True
    )

    friendly_name: Optional[str] = Field(default=None, max_length=255)
    offered_to_email: str = Field(max_length=255, nullable=False, index=True)
    plan_sponsorship_type: PlanSponsorshipType = Field(nullable=False)

    status: SponsorshipStatus = Field(default=SponsorshipStatus.offered)

    redemption_token_id: Optional[str] = Field(default=None, max_length=64)
    redemption_token_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    to_delete: bool = Field(default=False)
    terminated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    version: int = Field(default=1, nullable=False)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index(
            "uq_sponsorship_sponsoring_member_live",
            "sponsoring_organization_user_id",
            unique=True,
            sqlite_where=text(_NON_TERMINAL_ROWS),
            postgresql_where=text(_NON_TERMINAL_ROWS),
        ),
        Index(
            "uq_sponsorship_sponsored_org_live",
            "sponsored_organization_id",
            unique=True,
            sqlite_where=text(_NON_TERMINAL_ROWS),
            postgresql_where=text(_NON_TERMINAL_ROWS),
        ),
        Index("idx_sponsorship_status", "status"),
    )

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_SPONSORSHIP_STATUSES

    @property
    def is_active(self) -> bool:
        return self.status == SponsorshipStatus.active

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_SPONSORSHIP_STATUSES
