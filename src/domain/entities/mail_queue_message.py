"""
MailQueueMessage Entity

Outbound notification waiting for the mail transport.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from .enums import MailQueueStatus


class MailQueueMessage(SQLModel, table=True):
    """
    MailQueueMessage entity - one queued lifecycle email.

    Business Rules:
    - Written outside the lifecycle transaction (best-effort)
    - Delivery and retries belong to the mail transport, not to this service
    """

    __tablename__ = "mail_queue"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    kind: str = Field(max_length=100)
    subject: str = Field(max_length=255)
    recipients: List[str] = Field(sa_column=Column(JSON))
    model: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    status: MailQueueStatus = Field(default=MailQueueStatus.pending)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_mail_queue_status", "status"),)
