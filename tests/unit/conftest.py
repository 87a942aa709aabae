import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.entities import (
    Organization,
    OrganizationUser,
    OrganizationUserStatus,
    OrganizationUserType,
    PlanSponsorshipType,
    PlanType,
    Sponsorship,
    SponsorshipStatus,
)


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.sponsorships = MagicMock()
    uow.sponsorships.get_by_id = AsyncMock(return_value=None)
    uow.sponsorships.get_by_offering_member = AsyncMock(return_value=None)
    uow.sponsorships.get_by_offered_email = AsyncMock(return_value=None)
    uow.sponsorships.get_by_sponsored_organization = AsyncMock(return_value=None)
    uow.sponsorships.upsert = AsyncMock(side_effect=lambda sponsorship: sponsorship)

    uow.organizations = MagicMock()
    uow.organizations.get_by_id = AsyncMock(return_value=None)
    uow.organizations.update = AsyncMock(side_effect=lambda organization: organization)

    uow.organization_users = MagicMock()
    uow.organization_users.get_by_id = AsyncMock(return_value=None)
    uow.organization_users.get_by_organization_and_user = AsyncMock(return_value=None)
    uow.organization_users.get_many_by_minimum_role = AsyncMock(return_value=[])

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow


@pytest.fixture
def mock_dispatcher():
    dispatcher = MagicMock()
    dispatcher.enqueue = AsyncMock()
    return dispatcher


@pytest.fixture
def enterprise_org():
    return Organization(name="Acme Corp", plan_type=PlanType.enterprise_annually, seats=10)


@pytest.fixture
def families_org():
    return Organization(name="Doe Family", plan_type=PlanType.families_annually, seats=6)


@pytest.fixture
def sponsoring_member(enterprise_org):
    return OrganizationUser(
        organization_id=enterprise_org.id,
        email="member@acme.com",
        type=OrganizationUserType.user,
        status=OrganizationUserStatus.confirmed,
    )


@pytest.fixture
def families_owner(families_org):
    return OrganizationUser(
        organization_id=families_org.id,
        email="b@example.com",
        type=OrganizationUserType.owner,
        status=OrganizationUserStatus.confirmed,
    )


@pytest.fixture
def make_sponsorship(enterprise_org, sponsoring_member):
    def _make(status=SponsorshipStatus.offered, sponsored_organization_id=None, **kwargs):
        return Sponsorship(
            sponsoring_organization_id=enterprise_org.id,
            sponsoring_organization_user_id=sponsoring_member.id,
            sponsored_organization_id=sponsored_organization_id,
            offered_to_email=kwargs.pop("offered_to_email", "b@example.com"),
            plan_sponsorship_type=PlanSponsorshipType.families_for_enterprise,
            status=status,
            **kwargs,
        )

    return _make
