"""Repository interfaces for Plan Tour domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from plantour.domain.repository.invitation import InvitationRepository
from plantour.domain.repository.participant import ParticipantRepository
from plantour.domain.repository.profile import ProfileRepository
from plantour.domain.repository.tour import TourRepository
from plantour.domain.repository.transaction import Transaction

__all__ = [
    "InvitationRepository",
    "ParticipantRepository",
    "ProfileRepository",
    "TourRepository",
    "Transaction",
]
