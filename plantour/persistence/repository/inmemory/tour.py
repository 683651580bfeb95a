"""In-memory tour repository for testing."""

from typing import Optional

from plantour.domain.model.tour import Tour
from plantour.domain.repository.tour import TourRepository
from plantour.domain.value import TourId


class InMemoryTourRepository(TourRepository):
    """In-memory implementation of TourRepository for testing."""

    def __init__(self) -> None:
        self._tours: dict[TourId, Tour] = {}

    async def find_by_id(self, tour_id: TourId) -> Optional[Tour]:
        return self._tours.get(tour_id)

    async def save(self, tour: Tour) -> Tour:
        self._tours[tour.id] = tour
        return tour
