from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from src.app.repositories.errors import RepositoryConflictError
from src.app.use_cases.sponsorships import (
    RemoveSponsorshipUseCase,
    RevokeSponsorshipUseCase,
)
from src.domain.entities import (
    OrganizationUser,
    OrganizationUserType,
    SponsorshipStatus,
)
from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


# ============================================================================
# Revoke Sponsorship Tests
# ============================================================================


@pytest.mark.asyncio
async def test_revoke_pending_offer(
    mock_uow, mock_dispatcher, enterprise_org, sponsoring_member, make_sponsorship
):
    """Revoking an unredeemed offer tells the original recipient"""
    # Arrange
    sponsorship = make_sponsorship(SponsorshipStatus.offered)
    sponsorship.redemption_token_id = "nonce"

    # Act
    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    result = await use_case.execute(enterprise_org, sponsoring_member, sponsorship)

    # Assert
    assert result.status == "revoked"
    assert sponsorship.to_delete is True
    assert sponsorship.terminated_at is not None
    assert sponsorship.terminated_at <= datetime.utcnow()
    assert sponsorship.redemption_token_id is None

    audit = mock_uow.audit_events.create.call_args.args[0]
    assert audit.action == "sponsorship_revoked"
    assert audit.event_metadata["was_active"] is False
    mock_uow.organization_users.get_many_by_minimum_role.assert_not_called()
    mock_uow.commit.assert_called_once()

    kind, recipients, _model, _subject = mock_dispatcher.enqueue.call_args.args
    assert kind == "sponsorship_revoked"
    assert recipients == ["b@example.com"]


@pytest.mark.asyncio
async def test_revoke_active_sponsorship(
    mock_uow,
    mock_dispatcher,
    enterprise_org,
    sponsoring_member,
    families_org,
    families_owner,
    make_sponsorship,
):
    """Revoking an active sponsorship tells the sponsored organization's owners"""
    # Arrange
    sponsorship = make_sponsorship(
        SponsorshipStatus.active, sponsored_organization_id=families_org.id
    )
    mock_uow.organization_users.get_many_by_minimum_role.return_value = [families_owner]

    # Act
    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    result = await use_case.execute(enterprise_org, sponsoring_member, sponsorship)

    # Assert
    assert result.status == "revoked"
    assert result.sponsored_organization_id == str(families_org.id)
    mock_uow.organization_users.get_many_by_minimum_role.assert_called_once_with(
        families_org.id, OrganizationUserType.owner
    )
    assert mock_dispatcher.enqueue.call_args.args[1] == ["b@example.com"]


@pytest.mark.asyncio
async def test_revoke_active_sponsorship_with_sponsored_organization(
    mock_uow,
    mock_dispatcher,
    enterprise_org,
    sponsoring_member,
    families_org,
    families_owner,
    make_sponsorship,
):
    """The sponsored organization's name is carried into the revocation notice"""
    # Arrange
    sponsorship = make_sponsorship(
        SponsorshipStatus.active, sponsored_organization_id=families_org.id
    )
    mock_uow.organization_users.get_many_by_minimum_role.return_value = [families_owner]

    # Act
    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    result = await use_case.execute(
        enterprise_org, sponsoring_member, sponsorship, families_org
    )

    # Assert
    assert result.status == "revoked"
    model = mock_dispatcher.enqueue.call_args.args[2]
    assert model["sponsored_organization_name"] == families_org.name
    assert model["was_active"] is True


@pytest.mark.asyncio
async def test_revoke_with_unrelated_sponsored_organization(
    mock_uow,
    mock_dispatcher,
    enterprise_org,
    sponsoring_member,
    families_org,
    make_sponsorship,
):
    """An organization the sponsorship is not bound to is rejected"""
    sponsorship = make_sponsorship(SponsorshipStatus.offered)

    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(
            enterprise_org, sponsoring_member, sponsorship, families_org
        )

    assert exc_info.value.code == "SPONSORED_ORGANIZATION_MISMATCH"
    assert sponsorship.status == SponsorshipStatus.offered
    mock_uow.sponsorships.upsert.assert_not_called()
    mock_dispatcher.enqueue.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [SponsorshipStatus.revoked, SponsorshipStatus.removed])
async def test_revoke_terminal_sponsorship(
    status, mock_uow, mock_dispatcher, enterprise_org, sponsoring_member, make_sponsorship
):
    sponsorship = make_sponsorship(status, to_delete=True)

    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(enterprise_org, sponsoring_member, sponsorship)

    assert exc_info.value.code == "SPONSORSHIP_TERMINATED"
    mock_uow.sponsorships.upsert.assert_not_called()
    mock_dispatcher.enqueue.assert_not_called()


@pytest.mark.asyncio
async def test_revoke_by_other_member(
    mock_uow, mock_dispatcher, enterprise_org, make_sponsorship
):
    other_member = OrganizationUser(
        organization_id=enterprise_org.id,
        email="owner@acme.com",
        type=OrganizationUserType.owner,
    )

    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(AuthorizationError) as exc_info:
        await use_case.execute(
            enterprise_org, other_member, make_sponsorship(SponsorshipStatus.active)
        )

    assert exc_info.value.code == "NOT_SPONSORING_MEMBER"


@pytest.mark.asyncio
async def test_revoke_without_sponsorship(
    mock_uow, mock_dispatcher, enterprise_org, sponsoring_member
):
    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(NotFoundError):
        await use_case.execute(enterprise_org, sponsoring_member, None)


@pytest.mark.asyncio
async def test_revoke_concurrent_modification(
    mock_uow, mock_dispatcher, enterprise_org, sponsoring_member, make_sponsorship
):
    mock_uow.sponsorships.upsert = AsyncMock(side_effect=RepositoryConflictError("version"))

    use_case = RevokeSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(ConflictError):
        await use_case.execute(
            enterprise_org, sponsoring_member, make_sponsorship(SponsorshipStatus.offered)
        )

    mock_uow.commit.assert_not_called()


# ============================================================================
# Remove Sponsorship Tests
# ============================================================================


@pytest.mark.asyncio
async def test_remove_active_sponsorship(
    mock_uow,
    mock_dispatcher,
    families_org,
    families_owner,
    sponsoring_member,
    make_sponsorship,
):
    """The sponsored owner opts out and the sponsoring member is told"""
    # Arrange
    sponsorship = make_sponsorship(
        SponsorshipStatus.active, sponsored_organization_id=families_org.id
    )
    mock_uow.organization_users.get_by_id.return_value = sponsoring_member

    # Act
    use_case = RemoveSponsorshipUseCase(mock_uow, mock_dispatcher)
    result = await use_case.execute(families_org, families_owner, sponsorship)

    # Assert
    assert result.status == "removed"
    assert sponsorship.to_delete is True
    assert sponsorship.terminated_at is not None
    assert mock_uow.audit_events.create.call_args.args[0].action == "sponsorship_removed"
    mock_uow.commit.assert_called_once()

    kind, recipients, _model, _subject = mock_dispatcher.enqueue.call_args.args
    assert kind == "sponsorship_removed"
    assert recipients == ["member@acme.com"]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [SponsorshipStatus.offered, SponsorshipStatus.resent])
async def test_remove_pending_sponsorship(
    status, mock_uow, mock_dispatcher, families_org, families_owner, make_sponsorship
):
    """A never-redeemed offer cannot be removed by the sponsored side"""
    sponsorship = make_sponsorship(status, sponsored_organization_id=families_org.id)

    use_case = RemoveSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(families_org, families_owner, sponsorship)

    assert exc_info.value.code == "SPONSORSHIP_NOT_ACTIVE"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [SponsorshipStatus.revoked, SponsorshipStatus.removed])
async def test_remove_terminal_sponsorship(
    status, mock_uow, mock_dispatcher, families_org, families_owner, make_sponsorship
):
    sponsorship = make_sponsorship(
        status, sponsored_organization_id=families_org.id, to_delete=True
    )

    use_case = RemoveSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(families_org, families_owner, sponsorship)

    assert exc_info.value.code == "SPONSORSHIP_TERMINATED"
    mock_uow.sponsorships.upsert.assert_not_called()


@pytest.mark.asyncio
async def test_remove_by_non_owner(
    mock_uow, mock_dispatcher, families_org, families_owner, make_sponsorship
):
    families_owner.type = OrganizationUserType.user
    sponsorship = make_sponsorship(
        SponsorshipStatus.active, sponsored_organization_id=families_org.id
    )

    use_case = RemoveSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(AuthorizationError):
        await use_case.execute(families_org, families_owner, sponsorship)


@pytest.mark.asyncio
async def test_remove_sponsorship_of_other_organization(
    mock_uow, mock_dispatcher, families_org, families_owner, enterprise_org, make_sponsorship
):
    """The record must reference the caller's organization"""
    sponsorship = make_sponsorship(
        SponsorshipStatus.active, sponsored_organization_id=enterprise_org.id
    )

    use_case = RemoveSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(AuthorizationError):
        await use_case.execute(families_org, families_owner, sponsorship)


@pytest.mark.asyncio
async def test_remove_without_sponsorship(mock_uow, mock_dispatcher, families_org, families_owner):
    use_case = RemoveSponsorshipUseCase(mock_uow, mock_dispatcher)
    with pytest.raises(NotFoundError):
        await use_case.execute(families_org, families_owner, None)
