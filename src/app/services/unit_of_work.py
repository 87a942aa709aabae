from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.organization_repository import IOrganizationRepository
from src.app.repositories.organization_user_repository import IOrganizationUserRepository
from src.app.repositories.sponsorship_repository import ISponsorshipRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    organizations: IOrganizationRepository
    organization_users: IOrganizationUserRepository
    sponsorships: ISponsorshipRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
