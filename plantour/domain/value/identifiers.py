"""Strongly typed identifiers for Plan Tour domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
TourId = NewType("TourId", UUID)
InvitationId = NewType("InvitationId", UUID)
