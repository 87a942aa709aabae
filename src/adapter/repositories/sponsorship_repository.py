from typing import Optional
from uuid import UUID

from sqlalchemy import case, func, inspect
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.errors import (
    RepositoryConflictError,
    RepositoryNotFoundError,
)
from src.app.repositories.sponsorship_repository import ISponsorshipRepository
from src.domain.entities import (
    PENDING_SPONSORSHIP_STATUSES,
    TERMINAL_SPONSORSHIP_STATUSES,
    Sponsorship,
)

# Columns an update may change; identity and ownership are immutable
_MUTABLE_COLUMNS = (
    "sponsored_organization_id",
    "status",
    "redemption_token_id",
    "redemption_token_expires_at",
    "to_delete",
    "terminated_at",
)


def _non_terminal_first():
    return case((Sponsorship.status.in_(TERMINAL_SPONSORSHIP_STATUSES), 1), else_=0)


class SponsorshipRepository(ISponsorshipRepository):
    """Sponsorship repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, sponsorship_id: UUID) -> Optional[Sponsorship]:
        """Get sponsorship by ID"""
        stmt = select(Sponsorship).where(Sponsorship.id == sponsorship_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_offering_member(
        self, organization_id: UUID, organization_user_id: UUID
    ) -> Optional[Sponsorship]:
        """Get the sponsoring member's sponsorship, non-terminal first, newest first"""
        stmt = (
            select(Sponsorship)
            .where(
                Sponsorship.sponsoring_organization_id == organization_id,
                Sponsorship.sponsoring_organization_user_id == organization_user_id,
            )
            .order_by(_non_terminal_first(), Sponsorship.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_offered_email(self, email: str) -> Optional[Sponsorship]:
        """Get sponsorship offered to email (case-insensitive), pending first"""
        pending_first = case(
            (Sponsorship.status.in_(PENDING_SPONSORSHIP_STATUSES), 0), else_=1
        )
        stmt = (
            select(Sponsorship)
            .where(func.lower(Sponsorship.offered_to_email) == email.strip().lower())
            .order_by(pending_first, Sponsorship.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_sponsored_organization(
        self, organization_id: UUID
    ) -> Optional[Sponsorship]:
        """Get sponsorship bound to a sponsored organization, non-terminal first"""
        stmt = (
            select(Sponsorship)
            .where(Sponsorship.sponsored_organization_id == organization_id)
            .order_by(_non_terminal_first(), Sponsorship.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def upsert(self, sponsorship: Sponsorship) -> Sponsorship:
        """
        Insert a new sponsorship or compare-and-swap an existing one.

        Updates only apply when the stored version still matches the version
        the caller loaded; the version is bumped on success.
        """
        if not inspect(sponsorship).has_identity:
            return await self._insert(sponsorship)

        expected_version = sponsorship.version
        values = {column: getattr(sponsorship, column) for column in _MUTABLE_COLUMNS}
        values["version"] = expected_version + 1

        # Written by the statement below, not by the session's flush
        if sponsorship in self.session:
            self.session.expunge(sponsorship)

        stmt = (
            update(Sponsorship)
            .where(
                Sponsorship.id == sponsorship.id,
                Sponsorship.version == expected_version,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise RepositoryConflictError(str(exc.orig)) from exc

        if result.rowcount == 0:
            current = await self.get_by_id(sponsorship.id)
            if current is None:
                raise RepositoryNotFoundError(f"Sponsorship {sponsorship.id} not found")
            raise RepositoryConflictError(
                f"Sponsorship {sponsorship.id} was modified concurrently"
            )

        sponsorship.version = expected_version + 1
        return sponsorship

    async def _insert(self, sponsorship: Sponsorship) -> Sponsorship:
        self.session.add(sponsorship)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise RepositoryConflictError(str(exc.orig)) from exc
        await self.session.refresh(sponsorship)
        return sponsorship
