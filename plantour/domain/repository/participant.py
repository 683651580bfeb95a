"""Participant repository interface."""

from abc import ABC, abstractmethod

from plantour.domain.model.participant import Participant
from plantour.domain.value import TourId, UserId


class ParticipantRepository(ABC):
    """Repository for Participant entity."""

    @abstractmethod
    async def add(self, participant: Participant) -> Participant:
        """Insert a participant.

        Args:
            participant: The participant to insert

        Returns:
            The inserted participant

        Raises:
            IntegrityError: If the user already participates in the tour
        """
        pass

    @abstractmethod
    async def exists(self, tour_id: TourId, user_id: UserId) -> bool:
        """Check whether a user participates in a tour."""
        pass

    @abstractmethod
    async def find_by_tour(self, tour_id: TourId) -> list[Participant]:
        """List participants of a tour, earliest first."""
        pass
