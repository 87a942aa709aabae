from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.organization_user_repository import (
    IOrganizationUserRepository,
)
from src.domain.entities import OrganizationUser, OrganizationUserType

# Highest privilege first
_ROLE_ORDER = [
    OrganizationUserType.owner,
    OrganizationUserType.admin,
    OrganizationUserType.user,
]


class OrganizationUserRepository(IOrganizationUserRepository):
    """OrganizationUser repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, organization_user_id: UUID) -> Optional[OrganizationUser]:
        """Get organization user by ID"""
        stmt = select(OrganizationUser).where(OrganizationUser.id == organization_user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_organization_and_user(
        self, organization_id: UUID, user_id: UUID
    ) -> Optional[OrganizationUser]:
        """Get a user's membership in an organization"""
        stmt = select(OrganizationUser).where(
            OrganizationUser.organization_id == organization_id,
            OrganizationUser.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many_by_minimum_role(
        self, organization_id: UUID, minimum_type: OrganizationUserType
    ) -> List[OrganizationUser]:
        """Get members whose type is at least as privileged as minimum_type"""
        allowed = _ROLE_ORDER[: _ROLE_ORDER.index(minimum_type) + 1]
        stmt = select(OrganizationUser).where(
            OrganizationUser.organization_id == organization_id,
            OrganizationUser.type.in_(allowed),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
