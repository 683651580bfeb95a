"""Tour repository interface."""

from abc import ABC, abstractmethod

from plantour.domain.model.tour import Tour
from plantour.domain.value import TourId


class TourRepository(ABC):
    """Repository for Tour entity.

    Tours are owned by the tour CRUD endpoints; the invitation flow only
    reads them.
    """

    @abstractmethod
    async def find_by_id(self, tour_id: TourId) -> Tour | None:
        """Find a tour by ID.

        Raises:
            SQLAlchemyError: If the lookup fails
        """
        pass

    @abstractmethod
    async def save(self, tour: Tour) -> Tour:
        """Save a tour (create or update)."""
        pass
