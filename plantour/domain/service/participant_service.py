"""Participant domain service."""

import logfire
from sqlalchemy.exc import IntegrityError

from plantour.domain.error import AlreadyParticipantError
from plantour.domain.model import Participant
from plantour.domain.repository import ParticipantRepository, ProfileRepository
from plantour.domain.value import TourId, UserId
from plantour.util.email import normalize_email

from .base import Service


class ParticipantService(Service):
    """Domain service for tour membership."""

    def __init__(
        self,
        participant_repository: ParticipantRepository,
        profile_repository: ProfileRepository,
    ) -> None:
        """Initialize participant service.

        Args:
            participant_repository: Participant repository
            profile_repository: Profile repository
        """
        self.participant_repository = participant_repository
        self.profile_repository = profile_repository

    async def add_participant(self, tour_id: TourId, user_id: UserId) -> Participant:
        """Add a user to a tour.

        The (tour, user) unique constraint is what keeps concurrent accepts
        from creating two rows; the conflict is reported as a domain error.

        Raises:
            AlreadyParticipantError: If the user already participates
        """
        with logfire.span(
            "participant_service.add_participant",
            tour_id=str(tour_id),
            user_id=str(user_id),
        ):
            participant = Participant(tour_id=tour_id, user_id=user_id)
            try:
                saved = await self.participant_repository.add(participant)
            except IntegrityError:
                logfire.info(
                    "User is already a participant",
                    tour_id=str(tour_id),
                    user_id=str(user_id),
                )
                raise AlreadyParticipantError(str(tour_id), str(user_id))

            logfire.info(
                "Participant added", tour_id=str(tour_id), user_id=str(user_id)
            )
            return saved

    async def is_participant(self, tour_id: TourId, user_id: UserId) -> bool:
        return await self.participant_repository.exists(tour_id, user_id)

    async def participant_emails(self, tour_id: TourId) -> set[str]:
        """Normalized emails of everyone participating in a tour."""
        participants = await self.participant_repository.find_by_tour(tour_id)
        if not participants:
            return set()
        profiles = await self.profile_repository.find_by_ids(
            [p.user_id for p in participants]
        )
        return {normalize_email(profile.email) for profile in profiles}
