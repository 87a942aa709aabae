from uuid import UUID

import pytest

from src.adapter.repositories.sponsorship_repository import SponsorshipRepository
from src.app.repositories.errors import (
    RepositoryConflictError,
    RepositoryNotFoundError,
)
from src.domain.entities import PlanSponsorshipType, Sponsorship, SponsorshipStatus

ACME_ID = UUID("aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa")
FAMILY_ID = UUID("bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb")
SPONSOR_AT_ACME_ID = UUID("a1a1a1a1-a1a1-4a1a-8a1a-a1a1a1a1a1a1")
OWNER_AT_ACME_ID = UUID("a2a2a2a2-a2a2-4a2a-8a2a-a2a2a2a2a2a2")


def _new_sponsorship(
    sponsoring_organization_user_id=SPONSOR_AT_ACME_ID,
    offered_to_email="b@example.com",
    **kwargs,
) -> Sponsorship:
    return Sponsorship(
        sponsoring_organization_id=ACME_ID,
        sponsoring_organization_user_id=sponsoring_organization_user_id,
        offered_to_email=offered_to_email,
        plan_sponsorship_type=PlanSponsorshipType.families_for_enterprise,
        **kwargs,
    )


async def _insert(session_factory, sponsorship: Sponsorship) -> Sponsorship:
    async with session_factory() as session:
        sponsorship = await SponsorshipRepository(session).upsert(sponsorship)
        await session.commit()
        return sponsorship


# ============================================================================
# Compare-and-swap Tests
# ============================================================================


@pytest.mark.asyncio
async def test_upsert_stale_copy_conflicts(session_factory, seeded):
    """Two sessions load the same row; the second writer loses"""
    # Arrange
    inserted = await _insert(session_factory, _new_sponsorship())

    async with session_factory() as first, session_factory() as second:
        first_repo = SponsorshipRepository(first)
        second_repo = SponsorshipRepository(second)
        fresh = await first_repo.get_by_id(inserted.id)
        stale = await second_repo.get_by_id(inserted.id)
        assert fresh.version == stale.version == 1

        # Act
        fresh.status = SponsorshipStatus.resent
        await first_repo.upsert(fresh)
        await first.commit()

        stale.status = SponsorshipStatus.revoked
        stale.to_delete = True

        # Assert
        with pytest.raises(RepositoryConflictError):
            await second_repo.upsert(stale)

    async with session_factory() as session:
        stored = await SponsorshipRepository(session).get_by_id(inserted.id)
    assert stored.status == SponsorshipStatus.resent
    assert stored.version == 2
    assert stored.to_delete is False


@pytest.mark.asyncio
async def test_upsert_bumps_version_on_each_update(session_factory, seeded):
    inserted = await _insert(session_factory, _new_sponsorship())

    async with session_factory() as session:
        repo = SponsorshipRepository(session)
        sponsorship = await repo.get_by_id(inserted.id)
        sponsorship.status = SponsorshipStatus.resent
        sponsorship = await repo.upsert(sponsorship)
        sponsorship.redemption_token_id = "second-nonce"
        sponsorship = await repo.upsert(sponsorship)
        await session.commit()

    assert sponsorship.version == 3
    async with session_factory() as session:
        stored = await SponsorshipRepository(session).get_by_id(inserted.id)
    assert stored.version == 3
    assert stored.redemption_token_id == "second-nonce"


@pytest.mark.asyncio
async def test_upsert_deleted_row_not_found(session_factory, seeded):
    """Updating a row removed by another session reports it as missing"""
    inserted = await _insert(session_factory, _new_sponsorship())

    async with session_factory() as session:
        doomed = await SponsorshipRepository(session).get_by_id(inserted.id)
        await session.delete(doomed)
        await session.commit()

    inserted.status = SponsorshipStatus.revoked
    async with session_factory() as session:
        with pytest.raises(RepositoryNotFoundError):
            await SponsorshipRepository(session).upsert(inserted)


# ============================================================================
# One Live Sponsorship Tests
# ============================================================================


@pytest.mark.asyncio
async def test_second_live_row_for_member_conflicts(session_factory, seeded):
    """A member cannot hold two non-terminal sponsorships at once"""
    # Arrange
    await _insert(session_factory, _new_sponsorship())

    # Act / Assert
    async with session_factory() as session:
        with pytest.raises(RepositoryConflictError):
            await SponsorshipRepository(session).upsert(
                _new_sponsorship(offered_to_email="other@example.com")
            )


@pytest.mark.asyncio
async def test_new_row_for_member_allowed_after_revocation(session_factory, seeded):
    inserted = await _insert(session_factory, _new_sponsorship())

    async with session_factory() as session:
        repo = SponsorshipRepository(session)
        sponsorship = await repo.get_by_id(inserted.id)
        sponsorship.status = SponsorshipStatus.revoked
        sponsorship.to_delete = True
        await repo.upsert(sponsorship)
        await session.commit()

    replacement = await _insert(
        session_factory, _new_sponsorship(offered_to_email="other@example.com")
    )

    async with session_factory() as session:
        current = await SponsorshipRepository(session).get_by_offering_member(
            ACME_ID, SPONSOR_AT_ACME_ID
        )
    assert current.id == replacement.id


@pytest.mark.asyncio
async def test_second_live_row_for_sponsored_organization_conflicts(
    session_factory, seeded
):
    """Two members cannot both sponsor the same organization"""
    # Arrange
    await _insert(
        session_factory,
        _new_sponsorship(
            status=SponsorshipStatus.active, sponsored_organization_id=FAMILY_ID
        ),
    )

    # Act / Assert
    async with session_factory() as session:
        with pytest.raises(RepositoryConflictError):
            await SponsorshipRepository(session).upsert(
                _new_sponsorship(
                    sponsoring_organization_user_id=OWNER_AT_ACME_ID,
                    offered_to_email="owner@example.com",
                    status=SponsorshipStatus.active,
                    sponsored_organization_id=FAMILY_ID,
                )
            )


@pytest.mark.asyncio
async def test_binding_already_sponsored_organization_conflicts(
    session_factory, seeded
):
    """Redeeming a pending offer into an organization that is already sponsored fails"""
    # Arrange
    await _insert(
        session_factory,
        _new_sponsorship(
            status=SponsorshipStatus.active, sponsored_organization_id=FAMILY_ID
        ),
    )
    pending = await _insert(
        session_factory,
        _new_sponsorship(
            sponsoring_organization_user_id=OWNER_AT_ACME_ID,
            offered_to_email="owner@example.com",
        ),
    )

    # Act / Assert
    pending.status = SponsorshipStatus.active
    pending.sponsored_organization_id = FAMILY_ID
    async with session_factory() as session:
        with pytest.raises(RepositoryConflictError):
            await SponsorshipRepository(session).upsert(pending)

    async with session_factory() as session:
        stored = await SponsorshipRepository(session).get_by_id(pending.id)
    assert stored.status == SponsorshipStatus.offered
    assert stored.sponsored_organization_id is None
