"""Tour status guard."""

import logfire
from sqlalchemy.exc import SQLAlchemyError

from plantour.domain.error import (
    TourArchivedError,
    TourNotFoundError,
    TourStatusVerificationError,
)
from plantour.domain.model import Tour
from plantour.domain.repository import TourRepository
from plantour.domain.value import TourId

from .base import Service


class TourStatusService(Service):
    """Read-only checks on a tour before invitations are mutated."""

    def __init__(self, tour_repository: TourRepository) -> None:
        """Initialize tour status service.

        Args:
            tour_repository: Tour repository
        """
        self.tour_repository = tour_repository

    async def get_tour(self, tour_id: TourId) -> Tour:
        """Load a tour.

        Raises:
            TourNotFoundError: If the tour does not exist
            TourStatusVerificationError: If the lookup fails
        """
        try:
            tour = await self.tour_repository.find_by_id(tour_id)
        except SQLAlchemyError as e:
            logfire.error(
                "Tour lookup failed",
                tour_id=str(tour_id),
                error_type=type(e).__name__,
            )
            raise TourStatusVerificationError(str(tour_id)) from e

        if tour is None:
            logfire.warn("Tour not found", tour_id=str(tour_id))
            raise TourNotFoundError(str(tour_id))
        return tour

    async def ensure_not_archived(self, tour_id: TourId) -> Tour:
        """Fail unless the tour exists and is active.

        Args:
            tour_id: Tour to check

        Returns:
            The active tour

        Raises:
            TourNotFoundError: If the tour does not exist
            TourStatusVerificationError: If the lookup fails
            TourArchivedError: If the tour is archived
        """
        with logfire.span("tour_status.ensure_not_archived", tour_id=str(tour_id)):
            tour = await self.get_tour(tour_id)
            if tour.is_archived:
                logfire.warn("Mutation of archived tour rejected", tour_id=str(tour_id))
                raise TourArchivedError(str(tour_id))
            return tour

    async def is_archived(self, tour_id: TourId) -> bool:
        """Whether the tour is archived. Lookup failures still raise."""
        tour = await self.get_tour(tour_id)
        return tour.is_archived
