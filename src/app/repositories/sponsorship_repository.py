from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Sponsorship


class ISponsorshipRepository(ABC):
    """Sponsorship repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, sponsorship_id: UUID) -> Optional[Sponsorship]:
        """Get sponsorship by ID"""
        pass

    @abstractmethod
    async def get_by_offering_member(
        self, organization_id: UUID, organization_user_id: UUID
    ) -> Optional[Sponsorship]:
        """Get the sponsoring member's sponsorship, non-terminal first, newest first"""
        pass

    @abstractmethod
    async def get_by_offered_email(self, email: str) -> Optional[Sponsorship]:
        """Get sponsorship offered to email (case-insensitive), pending first"""
        pass

    @abstractmethod
    async def get_by_sponsored_organization(
        self, organization_id: UUID
    ) -> Optional[Sponsorship]:
        """Get sponsorship bound to a sponsored organization, non-terminal first"""
        pass

    @abstractmethod
    async def upsert(self, sponsorship: Sponsorship) -> Sponsorship:
        """
        Insert a new sponsorship or atomically update an existing one.

        Updates are compare-and-swap on (id, version).

        Raises:
            RepositoryConflictError: uniqueness violation or stale version
            RepositoryNotFoundError: the row to update no longer exists
        """
        pass
