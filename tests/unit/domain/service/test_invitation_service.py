"""Unit tests for InvitationService."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from plantour.config import InvitationSettings
from plantour.domain.error import (
    BusinessRuleViolationError,
    ErrorKind,
    ForbiddenError,
    InternalError,
    InvitationAlreadyProcessedError,
    InvitationExpiredError,
    InvitationNotFoundError,
    TourArchivedError,
    TourNotFoundError,
    ValidationError,
)
from plantour.domain.model.common import utcnow
from plantour.domain.repository import (
    InvitationRepository,
    ParticipantRepository,
    ProfileRepository,
)
from plantour.domain.service import (
    InvitationService,
    ParticipantService,
    TourStatusService,
)
from plantour.domain.value import (
    AcceptOutcome,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    TourId,
    TourStatus,
    UserId,
)
from plantour.persistence.repository.inmemory import (
    InMemoryInvitationRepository,
    InMemoryParticipantRepository,
    InMemoryProfileRepository,
    InMemoryTourRepository,
)
from tests.conftest import (
    seed_invitation,
    seed_participant,
    seed_profile,
    seed_tour,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


@pytest_asyncio.fixture
async def owner(unit_env):
    return await seed_profile(unit_env, "olga@gmail.com", "Olga")


@pytest_asyncio.fixture
async def tour(unit_env, owner):
    return await seed_tour(unit_env, owner)


@pytest_asyncio.fixture
async def invitee(unit_env):
    return await seed_profile(unit_env, "ivan@gmail.com", "Ivan")


class InterleavingInvitationRepository(InMemoryInvitationRepository):
    """Yields to the event loop after each read, so gathered calls interleave."""

    def __init__(self) -> None:
        super().__init__()
        self.reads = 0

    async def find_by_id(self, invitation_id):
        invitation = await super().find_by_id(invitation_id)
        self.reads += 1
        await asyncio.sleep(0)
        return invitation

    async def find_by_tour_and_email(self, tour_id, email):
        invitation = await super().find_by_tour_and_email(tour_id, email)
        await asyncio.sleep(0)
        return invitation


async def interleaving_service(unit_env, repo) -> InvitationService:
    return InvitationService(
        invitation_repository=repo,
        profile_repository=await unit_env.get(ProfileRepository),
        participant_service=await unit_env.get(ParticipantService),
        tour_status_service=await unit_env.get(TourStatusService),
        settings=InvitationSettings(),
    )


class TestSendInvitations:
    """Tests for send_invitations."""

    @pytest.mark.asyncio
    async def test_creates_pending_invitations(self, unit_env, owner, tour):
        """Should create one pending invitation per new address."""
        service = await unit_env.get(InvitationService)
        before = utcnow()

        result = await service.send_invitations(
            tour.id, owner.id, ["Ivan@Gmail.com ", "mia@proton.me"]
        )

        assert result.sent == ["ivan@gmail.com", "mia@proton.me"]
        assert result.skipped == []
        assert result.errors == []
        first = result.invitations[0]
        assert first.email == "ivan@gmail.com"
        assert first.status == InvitationStatus.PENDING
        assert first.inviter_id == owner.id
        assert len(first.token.root) == 32
        assert first.expires_at >= before + timedelta(days=7)

    @pytest.mark.asyncio
    async def test_tokens_are_unique(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        emails = [f"guest{i}@gmail.com" for i in range(20)]

        result = await service.send_invitations(tour.id, owner.id, emails)

        tokens = {invitation.token for invitation in result.invitations}
        assert len(tokens) == 20

    @pytest.mark.asyncio
    async def test_concurrent_sends_to_one_address(self, unit_env, owner, tour):
        """Should keep one invitation when two sends race for the same address."""
        # Arrange
        repo = InterleavingInvitationRepository()
        service = await interleaving_service(unit_env, repo)

        # Act
        first, second = await asyncio.gather(
            service.send_invitations(tour.id, owner.id, ["ivan@gmail.com"]),
            service.send_invitations(tour.id, owner.id, ["ivan@gmail.com"]),
        )

        # Assert
        assert first.sent == ["ivan@gmail.com"]
        assert second.sent == []
        assert second.skipped == ["ivan@gmail.com"]
        assert second.errors == []
        assert await repo.count_by_tour(tour.id) == 1

    @pytest.mark.asyncio
    async def test_skips_participants(self, unit_env, owner, tour, invitee):
        """Should skip addresses that belong to current participants."""
        service = await unit_env.get(InvitationService)
        await seed_participant(unit_env, tour, invitee)

        result = await service.send_invitations(
            tour.id, owner.id, ["IVAN@gmail.com", "olga@gmail.com"]
        )

        assert result.sent == []
        assert result.skipped == ["ivan@gmail.com", "olga@gmail.com"]

    @pytest.mark.asyncio
    async def test_skips_active_and_accepted_invitations(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        await seed_invitation(unit_env, tour, "pending@gmail.com")
        await seed_invitation(
            unit_env, tour, "accepted@gmail.com", status=InvitationStatus.ACCEPTED
        )

        result = await service.send_invitations(
            tour.id, owner.id, ["pending@gmail.com", "accepted@gmail.com"]
        )

        assert result.sent == []
        assert result.skipped == ["pending@gmail.com", "accepted@gmail.com"]

    @pytest.mark.asyncio
    async def test_reissues_declined_invitation_in_place(self, unit_env, owner, tour):
        """Should reuse the declined row with a fresh token and expiry."""
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        declined = await seed_invitation(
            unit_env,
            tour,
            "ivan@gmail.com",
            status=InvitationStatus.DECLINED,
            expires_in=timedelta(days=1),
            with_token=False,
        )

        result = await service.send_invitations(tour.id, owner.id, ["ivan@gmail.com"])

        assert result.sent == ["ivan@gmail.com"]
        reissued = result.invitations[0]
        assert reissued.id == declined.id
        assert reissued.status == InvitationStatus.PENDING
        assert reissued.token is not None
        assert reissued.expires_at > declined.expires_at
        assert await repo.count_by_tour(tour.id) == 1

    @pytest.mark.asyncio
    async def test_reissues_expired_invitation(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        expired = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", expires_in=timedelta(hours=-1)
        )

        result = await service.send_invitations(tour.id, owner.id, ["ivan@gmail.com"])

        assert result.invitations[0].id == expired.id
        assert result.invitations[0].token != expired.token
        assert not result.invitations[0].is_expired()

    @pytest.mark.asyncio
    async def test_reports_invalid_addresses(self, unit_env, owner, tour):
        """Should report invalid addresses and still send the valid ones."""
        service = await unit_env.get(InvitationService)

        result = await service.send_invitations(
            tour.id, owner.id, ["ivan@gmail.com", "nobody@host.notatld", "plain"]
        )

        assert result.sent == ["ivan@gmail.com"]
        assert [(e.email, e.error) for e in result.errors] == [
            ("nobody@host.notatld", "Invalid TLD"),
            ("plain", "Invalid email format"),
        ]

    @pytest.mark.asyncio
    async def test_batch_duplicates_processed_once(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)

        result = await service.send_invitations(
            tour.id, owner.id, ["ivan@gmail.com", "IVAN@gmail.com"]
        )

        assert result.sent == ["ivan@gmail.com"]
        assert len(result.invitations) == 1

    @pytest.mark.asyncio
    async def test_participant_who_is_not_owner_is_forbidden(
        self, unit_env, tour, invitee
    ):
        service = await unit_env.get(InvitationService)
        await seed_participant(unit_env, tour, invitee)

        with pytest.raises(ForbiddenError):
            await service.send_invitations(tour.id, invitee.id, ["mia@proton.me"])

    @pytest.mark.asyncio
    async def test_stranger_gets_not_found(self, unit_env, tour, invitee):
        """Should hide the tour from users with no access to it."""
        service = await unit_env.get(InvitationService)

        with pytest.raises(TourNotFoundError):
            await service.send_invitations(tour.id, invitee.id, ["mia@proton.me"])

    @pytest.mark.asyncio
    async def test_archived_tour(self, unit_env, owner):
        service = await unit_env.get(InvitationService)
        archived = await seed_tour(unit_env, owner, status=TourStatus.ARCHIVED)

        with pytest.raises(TourArchivedError) as exc_info:
            await service.send_invitations(archived.id, owner.id, ["ivan@gmail.com"])

        assert exc_info.value.kind == ErrorKind.TOUR_ARCHIVED
        assert exc_info.value.message == (
            "Cannot modify an archived tour. Archived tours are read-only."
        )

    @pytest.mark.asyncio
    async def test_missing_tour(self, unit_env, owner):
        service = await unit_env.get(InvitationService)

        with pytest.raises(TourNotFoundError):
            await service.send_invitations(
                TourId(uuid4()), owner.id, ["ivan@gmail.com"]
            )

    @pytest.mark.asyncio
    async def test_storage_failure_is_reported_per_email(self, unit_env, owner, tour):
        """Should keep going when one insert fails."""

        class FlakyInvitationRepository(InMemoryInvitationRepository):
            async def save(self, invitation):
                if invitation.email.startswith("broken"):
                    raise OperationalError("INSERT", {}, Exception("boom"))
                return await super().save(invitation)

        service = InvitationService(
            invitation_repository=FlakyInvitationRepository(),
            profile_repository=await unit_env.get(ProfileRepository),
            participant_service=await unit_env.get(ParticipantService),
            tour_status_service=await unit_env.get(TourStatusService),
            settings=InvitationSettings(),
        )

        result = await service.send_invitations(
            tour.id, owner.id, ["broken@gmail.com", "ivan@gmail.com"]
        )

        assert result.sent == ["ivan@gmail.com"]
        assert [(e.email, e.error) for e in result.errors] == [
            ("broken@gmail.com", "Failed to create invitation")
        ]

    @pytest.mark.asyncio
    async def test_token_generation_gives_up(self, unit_env, owner, tour):
        """Should fail the address when no unused token can be found."""

        class CollidingInvitationRepository(InMemoryInvitationRepository):
            async def token_exists(self, token):
                return True

        service = InvitationService(
            invitation_repository=CollidingInvitationRepository(),
            profile_repository=await unit_env.get(ProfileRepository),
            participant_service=await unit_env.get(ParticipantService),
            tour_status_service=await unit_env.get(TourStatusService),
            settings=InvitationSettings(token_attempts=3),
        )

        result = await service.send_invitations(tour.id, owner.id, ["ivan@gmail.com"])

        assert result.sent == []
        assert result.errors[0].error == "Failed to generate invitation token"


class TestGetByToken:
    """Tests for get_by_token."""

    @pytest.mark.asyncio
    async def test_returns_details(self, unit_env, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        details = await service.get_by_token(invitation.token)

        assert details.invitation.id == invitation.id
        assert details.tour.title == "Dolomites Hut Trek"
        assert details.inviter.display_name == "Olga"
        assert details.is_expired is False

    @pytest.mark.asyncio
    async def test_flags_expired(self, unit_env, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", expires_in=timedelta(minutes=-5)
        )

        details = await service.get_by_token(invitation.token)

        assert details.is_expired is True

    @pytest.mark.asyncio
    async def test_unknown_token(self, unit_env):
        service = await unit_env.get(InvitationService)

        with pytest.raises(InvitationNotFoundError):
            await service.get_by_token(InvitationToken.generate())

    @pytest.mark.asyncio
    async def test_storage_error_is_generic(self, unit_env):
        """Should never surface driver error text to the caller."""

        class BrokenInvitationRepository(InMemoryInvitationRepository):
            async def find_by_token(self, token):
                raise OperationalError(
                    "SELECT ... WHERE token = %(token)s",
                    {"token": token.root},
                    Exception("connection refused"),
                )

        service = InvitationService(
            invitation_repository=BrokenInvitationRepository(),
            profile_repository=InMemoryProfileRepository(),
            participant_service=ParticipantService(
                InMemoryParticipantRepository(), InMemoryProfileRepository()
            ),
            tour_status_service=TourStatusService(InMemoryTourRepository()),
            settings=InvitationSettings(),
        )
        token = InvitationToken.generate()

        with pytest.raises(InternalError) as exc_info:
            await service.get_by_token(token)

        assert exc_info.value.kind == ErrorKind.INTERNAL
        assert exc_info.value.message == "Failed to load invitation"
        assert token.root not in str(exc_info.value)


class TestAccept:
    """Tests for accept."""

    @pytest.mark.asyncio
    async def test_accept_joins_tour(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        participants = await unit_env.get(ParticipantRepository)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        result = await service.accept(invitation.id, None, invitee.id, "Ivan@Gmail.com")

        assert result.outcome == AcceptOutcome.ACCEPTED
        assert result.tour_id == tour.id
        assert result.invitation.status == InvitationStatus.ACCEPTED
        assert result.invitation.token is None
        assert await participants.exists(tour.id, invitee.id)

    @pytest.mark.asyncio
    async def test_reaccept_reports_already_participant(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")

        result = await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")

        assert result.outcome == AcceptOutcome.ALREADY_PARTICIPANT

    @pytest.mark.asyncio
    async def test_existing_participant_accepting(self, unit_env, tour, invitee):
        """Should accept the invitation and report the existing membership."""
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        await seed_participant(unit_env, tour, invitee)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        result = await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")

        assert result.outcome == AcceptOutcome.ALREADY_PARTICIPANT
        stored = await repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_concurrent_accepts_create_one_participant(
        self, unit_env, tour, invitee
    ):
        service = await unit_env.get(InvitationService)
        participants = await unit_env.get(ParticipantRepository)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        results = await asyncio.gather(
            service.accept(invitation.id, None, invitee.id, "ivan@gmail.com"),
            service.accept(invitation.id, None, invitee.id, "ivan@gmail.com"),
        )

        assert {r.outcome for r in results} == {
            AcceptOutcome.ACCEPTED,
            AcceptOutcome.ALREADY_PARTICIPANT,
        }
        members = await participants.find_by_tour(tour.id)
        assert [m.user_id for m in members].count(invitee.id) == 1

    @pytest.mark.asyncio
    async def test_interleaved_accepts(self, unit_env, tour, invitee):
        """Should re-read after losing the status race and report the join."""
        # Arrange
        repo = InterleavingInvitationRepository()
        service = await interleaving_service(unit_env, repo)
        participants = await unit_env.get(ParticipantRepository)
        invitation = await repo.save(
            await seed_invitation(unit_env, tour, "ivan@gmail.com")
        )

        # Act
        results = await asyncio.gather(
            service.accept(invitation.id, None, invitee.id, "ivan@gmail.com"),
            service.accept(invitation.id, None, invitee.id, "ivan@gmail.com"),
        )

        # Assert
        assert [r.outcome for r in results] == [
            AcceptOutcome.ACCEPTED,
            AcceptOutcome.ALREADY_PARTICIPANT,
        ]
        # Two reads of the pending row, then the loser re-reads
        assert repo.reads == 3
        members = await participants.find_by_tour(tour.id)
        assert sorted(str(m.user_id) for m in members) == sorted(
            [str(tour.owner_id), str(invitee.id)]
        )

    @pytest.mark.asyncio
    async def test_accepted_by_someone_else(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env,
            tour,
            "ivan@gmail.com",
            status=InvitationStatus.ACCEPTED,
            with_token=False,
        )
        other = await seed_profile(unit_env, "mia@proton.me")

        with pytest.raises(InvitationAlreadyProcessedError):
            await service.accept(invitation.id, None, other.id, "mia@proton.me")

    @pytest.mark.asyncio
    async def test_expired(self, unit_env, tour, invitee):
        """Should reject an expired invitation whatever the caller's email."""
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", expires_in=timedelta(seconds=-1)
        )

        with pytest.raises(InvitationExpiredError):
            await service.accept(invitation.id, None, invitee.id, "someone@else.com")

    @pytest.mark.asyncio
    async def test_email_mismatch(self, unit_env, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        other = await seed_profile(unit_env, "mia@proton.me")

        with pytest.raises(ForbiddenError):
            await service.accept(invitation.id, None, other.id, "mia@proton.me")

    @pytest.mark.asyncio
    async def test_archived_tour(self, unit_env, owner, invitee):
        service = await unit_env.get(InvitationService)
        archived = await seed_tour(unit_env, owner, status=TourStatus.ARCHIVED)
        invitation = await seed_invitation(unit_env, archived, "ivan@gmail.com")

        with pytest.raises(TourArchivedError):
            await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")

    @pytest.mark.asyncio
    async def test_not_found(self, unit_env, invitee):
        service = await unit_env.get(InvitationService)

        with pytest.raises(InvitationNotFoundError):
            await service.accept(
                InvitationId(uuid4()), None, invitee.id, "ivan@gmail.com"
            )

    @pytest.mark.asyncio
    async def test_wrong_supplied_token(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        with pytest.raises(ForbiddenError):
            await service.accept(
                invitation.id, InvitationToken.generate(), invitee.id, "ivan@gmail.com"
            )

    @pytest.mark.asyncio
    async def test_declined_needs_caller_token(self, unit_env, tour, invitee):
        """Should require the link token once the stored one is cleared."""
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        token = invitation.token
        await service.decline(invitation.id, None, invitee.id, "ivan@gmail.com")

        with pytest.raises(ValidationError, match="Invitation token is missing"):
            await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")

        result = await service.accept(invitation.id, token, invitee.id, "ivan@gmail.com")
        assert result.outcome == AcceptOutcome.ACCEPTED

    @pytest.mark.asyncio
    async def test_accept_after_cancel(self, unit_env, owner, tour, invitee):
        """Cancel wins when it commits first."""
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        await service.cancel(invitation.id, owner.id)

        with pytest.raises(InvitationNotFoundError):
            await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")


class TestDecline:
    """Tests for decline."""

    @pytest.mark.asyncio
    async def test_decline(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        declined = await service.decline(
            invitation.id, None, invitee.id, "ivan@gmail.com"
        )

        assert declined.status == InvitationStatus.DECLINED
        assert declined.token is None

    @pytest.mark.asyncio
    async def test_decline_is_idempotent(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        first = await service.decline(invitation.id, None, invitee.id, "ivan@gmail.com")

        second = await service.decline(
            invitation.id, None, invitee.id, "ivan@gmail.com"
        )

        assert second == first

    @pytest.mark.asyncio
    async def test_decline_accepted(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")

        with pytest.raises(InvitationAlreadyProcessedError):
            await service.decline(invitation.id, None, invitee.id, "ivan@gmail.com")

    @pytest.mark.asyncio
    async def test_decline_expired(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", expires_in=timedelta(days=-2)
        )

        with pytest.raises(InvitationExpiredError):
            await service.decline(invitation.id, None, invitee.id, "ivan@gmail.com")


class TestCancel:
    """Tests for cancel."""

    @pytest.mark.asyncio
    async def test_owner_cancels_pending(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        await service.cancel(invitation.id, owner.id)

        assert await repo.find_by_id(invitation.id) is None

    @pytest.mark.asyncio
    async def test_owner_cancels_declined(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", status=InvitationStatus.DECLINED
        )

        await service.cancel(invitation.id, owner.id)

        assert await repo.find_by_id(invitation.id) is None

    @pytest.mark.asyncio
    async def test_cannot_cancel_accepted(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        repo = await unit_env.get(InvitationRepository)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", status=InvitationStatus.ACCEPTED
        )

        with pytest.raises(
            BusinessRuleViolationError, match="Cannot cancel an accepted invitation"
        ):
            await service.cancel(invitation.id, owner.id)

        assert await repo.find_by_id(invitation.id) is not None

    @pytest.mark.asyncio
    async def test_invitee_is_forbidden(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        with pytest.raises(ForbiddenError):
            await service.cancel(invitation.id, invitee.id, "ivan@gmail.com")

    @pytest.mark.asyncio
    async def test_stranger_gets_not_found(self, unit_env, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        stranger = await seed_profile(unit_env, "mia@proton.me")

        with pytest.raises(InvitationNotFoundError):
            await service.cancel(invitation.id, stranger.id, "mia@proton.me")

    @pytest.mark.asyncio
    async def test_archived_tour(self, unit_env, owner):
        service = await unit_env.get(InvitationService)
        archived = await seed_tour(unit_env, owner, status=TourStatus.ARCHIVED)
        invitation = await seed_invitation(unit_env, archived, "ivan@gmail.com")

        with pytest.raises(TourArchivedError):
            await service.cancel(invitation.id, owner.id)

    @pytest.mark.asyncio
    async def test_cancel_after_accept(self, unit_env, owner, tour, invitee):
        """Accept wins when it commits first."""
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        await service.accept(invitation.id, None, invitee.id, "ivan@gmail.com")

        with pytest.raises(BusinessRuleViolationError):
            await service.cancel(invitation.id, owner.id)


class TestResend:
    """Tests for resend."""

    @pytest.mark.asyncio
    async def test_resend_declined(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env,
            tour,
            "ivan@gmail.com",
            status=InvitationStatus.DECLINED,
            with_token=False,
        )

        resent = await service.resend(invitation.id, owner.id)

        assert resent.id == invitation.id
        assert resent.status == InvitationStatus.PENDING
        assert resent.token is not None
        assert resent.is_active()

    @pytest.mark.asyncio
    async def test_resend_expired(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", expires_in=timedelta(days=-1)
        )

        resent = await service.resend(invitation.id, owner.id)

        assert resent.token != invitation.token
        assert resent.expires_at > utcnow() + timedelta(days=6)

    @pytest.mark.asyncio
    async def test_resend_active_is_rejected(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(unit_env, tour, "ivan@gmail.com")

        with pytest.raises(BusinessRuleViolationError, match="still active"):
            await service.resend(invitation.id, owner.id)

    @pytest.mark.asyncio
    async def test_resend_accepted_is_rejected(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", status=InvitationStatus.ACCEPTED
        )

        with pytest.raises(BusinessRuleViolationError, match="accepted"):
            await service.resend(invitation.id, owner.id)

    @pytest.mark.asyncio
    async def test_non_owner(self, unit_env, tour):
        service = await unit_env.get(InvitationService)
        invitation = await seed_invitation(
            unit_env, tour, "ivan@gmail.com", status=InvitationStatus.DECLINED
        )

        with pytest.raises(InvitationNotFoundError):
            await service.resend(invitation.id, UserId(uuid4()))


class TestListing:
    """Tests for list_pending_for_email and list_for_tour."""

    @pytest.mark.asyncio
    async def test_pending_for_email(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        second_tour = await seed_tour(unit_env, owner, title="Lofoten Kayak")
        expired_tour = await seed_tour(unit_env, owner, title="Tatra Ridge Walk")
        declined_tour = await seed_tour(unit_env, owner, title="Etna Summit")
        active = await seed_invitation(unit_env, tour, "ivan@gmail.com")
        other_tour = await seed_invitation(unit_env, second_tour, "ivan@gmail.com")
        await seed_invitation(
            unit_env, expired_tour, "ivan@gmail.com", expires_in=timedelta(days=-1)
        )
        await seed_invitation(
            unit_env,
            declined_tour,
            "ivan@gmail.com",
            status=InvitationStatus.DECLINED,
        )
        await seed_invitation(unit_env, tour, "mia@proton.me")

        pending = await service.list_pending_for_email(" IVAN@gmail.com ")

        assert {i.id for i in pending} == {active.id, other_tour.id}

    @pytest.mark.asyncio
    async def test_list_for_tour_paginates(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)
        for i in range(5):
            await seed_invitation(unit_env, tour, f"guest{i}@gmail.com")

        items, pagination = await service.list_for_tour(
            tour.id, owner.id, page=2, limit=2
        )

        assert len(items) == 2
        assert pagination.page == 2
        assert pagination.limit == 2
        assert pagination.total == 5

    @pytest.mark.asyncio
    async def test_list_for_tour_caps_limit(self, unit_env, owner, tour):
        service = await unit_env.get(InvitationService)

        _, pagination = await service.list_for_tour(tour.id, owner.id, limit=500)

        assert pagination.limit == 100

    @pytest.mark.asyncio
    async def test_list_for_tour_participant_forbidden(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)
        await seed_participant(unit_env, tour, invitee)

        with pytest.raises(ForbiddenError):
            await service.list_for_tour(tour.id, invitee.id)

    @pytest.mark.asyncio
    async def test_list_for_tour_stranger_not_found(self, unit_env, tour, invitee):
        service = await unit_env.get(InvitationService)

        with pytest.raises(TourNotFoundError):
            await service.list_for_tour(tour.id, invitee.id)
