"""In-memory participant repository for testing."""

from sqlalchemy.exc import IntegrityError

from plantour.domain.model.participant import Participant
from plantour.domain.repository.participant import ParticipantRepository
from plantour.domain.value import TourId, UserId


class InMemoryParticipantRepository(ParticipantRepository):
    """In-memory implementation of ParticipantRepository for testing."""

    def __init__(self) -> None:
        self._participants: list[Participant] = []

    async def add(self, participant: Participant) -> Participant:
        """Insert a participant.

        Raises:
            IntegrityError: If the user already participates (duplicate key)
        """
        if await self.exists(participant.tour_id, participant.user_id):
            raise IntegrityError("Duplicate participant", None, Exception())

        self._participants.append(participant)
        return participant

    async def exists(self, tour_id: TourId, user_id: UserId) -> bool:
        return any(
            p.tour_id == tour_id and p.user_id == user_id for p in self._participants
        )

    async def find_by_tour(self, tour_id: TourId) -> list[Participant]:
        matches = [p for p in self._participants if p.tour_id == tour_id]
        matches.sort(key=lambda p: p.joined_at)
        return matches
