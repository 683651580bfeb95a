"""Participant domain model."""

from datetime import datetime

from pydantic import Field

from plantour.domain.model.common import DomainModel, utcnow
from plantour.domain.value import TourId, UserId


class Participant(DomainModel):
    """Confirmed member of a tour. Unique per (tour, user)."""

    tour_id: TourId
    user_id: UserId
    joined_at: datetime = Field(default_factory=utcnow)
