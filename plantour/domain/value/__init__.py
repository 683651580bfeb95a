"""Domain value objects for Plan Tour."""

from plantour.domain.value.identifiers import InvitationId, TourId, UserId
from plantour.domain.value.types import (
    AcceptOutcome,
    InvitationStatus,
    InvitationToken,
    Pagination,
    TourStatus,
)

__all__ = [
    # Identifiers
    "UserId",
    "TourId",
    "InvitationId",
    # Types
    "AcceptOutcome",
    "InvitationStatus",
    "InvitationToken",
    "Pagination",
    "TourStatus",
]
