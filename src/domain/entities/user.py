"""
User Entity

Represents an authenticated person; the source of the caller's email.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel


class User(SQLModel, table=True):
    """
    User entity - a person who can belong to multiple organizations.

    Business Rules:
    - Email must be unique across all users
    - Redemption tokens are bound to the user's email
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
