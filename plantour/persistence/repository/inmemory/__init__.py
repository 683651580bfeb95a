"""In-memory repository implementations for testing."""

from .invitation import InMemoryInvitationRepository
from .participant import InMemoryParticipantRepository
from .profile import InMemoryProfileRepository
from .tour import InMemoryTourRepository
from .transaction import InMemoryTransaction

__all__ = [
    "InMemoryInvitationRepository",
    "InMemoryParticipantRepository",
    "InMemoryProfileRepository",
    "InMemoryTourRepository",
    "InMemoryTransaction",
]
