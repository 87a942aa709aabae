from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import OrganizationUser, OrganizationUserType


class IOrganizationUserRepository(ABC):
    """OrganizationUser repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, organization_user_id: UUID) -> Optional[OrganizationUser]:
        """Get organization user by ID"""
        pass

    @abstractmethod
    async def get_by_organization_and_user(
        self, organization_id: UUID, user_id: UUID
    ) -> Optional[OrganizationUser]:
        """Get a user's membership in an organization"""
        pass

    @abstractmethod
    async def get_many_by_minimum_role(
        self, organization_id: UUID, minimum_type: OrganizationUserType
    ) -> List[OrganizationUser]:
        """Get members whose type is at least as privileged as minimum_type"""
        pass
