from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Organization


class IOrganizationRepository(ABC):
    """Organization repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        """Get organization by ID"""
        pass

    @abstractmethod
    async def update(self, organization: Organization) -> Organization:
        """Update existing organization"""
        pass
