"""
Organization Entity

An organization that can sponsor, or be sponsored by, another organization.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import PlanType


class Organization(SQLModel, table=True):
    """
    Organization entity - the billing unit owning seats and a plan.

    Business Rules:
    - Only enterprise plans on cloud installations may sponsor
    - Only families plans may be sponsored
    - Owners are told about seat autoscaling at most once
      (owners_notified_of_autoscaling)
    """

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    plan_type: PlanType = Field(default=PlanType.free)
    seats: Optional[int] = Field(default=None)
    max_autoscale_seats: Optional[int] = Field(default=None)
    enabled: bool = Field(default=True)

    owners_notified_of_autoscaling: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_organization_plan_type", "plan_type"),)
