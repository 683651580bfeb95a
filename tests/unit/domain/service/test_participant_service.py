"""Unit tests for ParticipantService."""

import pytest

from plantour.domain.error import AlreadyParticipantError, ErrorKind
from plantour.domain.service import ParticipantService
from tests.conftest import seed_participant, seed_profile, seed_tour
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestParticipantService:
    """Tests for ParticipantService."""

    @pytest.mark.asyncio
    async def test_add_participant(self, unit_env):
        """Should add a new member to the tour."""
        # Arrange
        service = await unit_env.get(ParticipantService)
        owner = await seed_profile(unit_env, "olga@gmail.com")
        tour = await seed_tour(unit_env, owner)
        user = await seed_profile(unit_env, "ivan@gmail.com")

        # Act
        participant = await service.add_participant(tour.id, user.id)

        # Assert
        assert participant.tour_id == tour.id
        assert participant.user_id == user.id
        assert await service.is_participant(tour.id, user.id)

    @pytest.mark.asyncio
    async def test_add_existing_participant(self, unit_env):
        """Should report a duplicate membership as a domain error."""
        service = await unit_env.get(ParticipantService)
        owner = await seed_profile(unit_env, "olga@gmail.com")
        tour = await seed_tour(unit_env, owner)

        with pytest.raises(AlreadyParticipantError) as exc_info:
            await service.add_participant(tour.id, owner.id)

        assert exc_info.value.kind == ErrorKind.ALREADY_PARTICIPANT

    @pytest.mark.asyncio
    async def test_participant_emails_are_normalized(self, unit_env):
        service = await unit_env.get(ParticipantService)
        owner = await seed_profile(unit_env, "Olga@Gmail.com")
        tour = await seed_tour(unit_env, owner)
        user = await seed_profile(unit_env, "ivan@gmail.com")
        await seed_participant(unit_env, tour, user)

        emails = await service.participant_emails(tour.id)

        assert emails == {"olga@gmail.com", "ivan@gmail.com"}

    @pytest.mark.asyncio
    async def test_is_participant_false_for_stranger(self, unit_env):
        service = await unit_env.get(ParticipantService)
        owner = await seed_profile(unit_env, "olga@gmail.com")
        tour = await seed_tour(unit_env, owner)
        stranger = await seed_profile(unit_env, "mia@proton.me")

        assert await service.is_participant(tour.id, stranger.id) is False
