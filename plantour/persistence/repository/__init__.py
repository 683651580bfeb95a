"""PostgreSQL repository implementations."""

from plantour.persistence.repository.invitation import PostgresInvitationRepository
from plantour.persistence.repository.participant import PostgresParticipantRepository
from plantour.persistence.repository.profile import PostgresProfileRepository
from plantour.persistence.repository.tour import PostgresTourRepository
from plantour.persistence.repository.transaction import PostgresTransaction

__all__ = [
    "PostgresInvitationRepository",
    "PostgresParticipantRepository",
    "PostgresProfileRepository",
    "PostgresTourRepository",
    "PostgresTransaction",
]
