"""Domain value objects for Plan Tour.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
import secrets
from enum import Enum

from pydantic import Field, field_validator

from plantour.domain.value.common import RootValueObject, ValueObject

_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9]{32,64}$")


class InvitationStatus(str, Enum):
    """Stored status of an invitation.

    Expiry is not a status: it is derived from ``expires_at`` at read time.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class TourStatus(str, Enum):
    """Status of a tour. Archived tours are read-only."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class AcceptOutcome(str, Enum):
    """How an accept call was resolved."""

    ACCEPTED = "accepted"
    ALREADY_PARTICIPANT = "already_participant"


class InvitationToken(RootValueObject[str]):
    """Opaque invitation token embedded in invitation links.

    Freshly issued tokens are 32 lowercase hex characters (16 random bytes).
    Up to 64 alphanumeric characters are accepted from callers.
    """

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token length and alphabet."""
        if not _TOKEN_PATTERN.match(v):
            raise ValueError("Token must be 32-64 alphanumeric characters")
        return v

    @classmethod
    def generate(cls) -> "InvitationToken":
        """Generate a new high-entropy token."""
        return cls(secrets.token_hex(16))

    @property
    def prefix(self) -> str:
        """Shortened form that is safe to log."""
        return self.root[:8] + "..."


class Pagination(ValueObject):
    """Page window of a listing. Pages are 1-indexed."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    total: int = 0

    @property
    def offset(self) -> int:
        """Number of rows skipped before this page."""
        return (self.page - 1) * self.limit
