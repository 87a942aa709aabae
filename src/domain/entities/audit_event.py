"""
AuditEvent Entity

Immutable log of sponsorship lifecycle events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of sponsorship lifecycle events.

    Business Rules:
    - Immutable (never updated or deleted)
    - Written in the same transaction as the transition it records
    - Metadata stores additional context (sponsorship id, emails, etc.)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: Optional[UUID] = Field(default=None, index=True)
    user_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "sponsorship_offered"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_organization_action", "organization_id", "action"),
    )
