"""Domain layer errors.

Every domain error carries an ``ErrorKind``. Callers (the HTTP layer in
particular) branch on ``kind`` and never on the message text.
"""

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """Closed set of domain failure categories."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    EXPIRED = "expired"
    ALREADY_PROCESSED = "already_processed"
    ALREADY_PARTICIPANT = "already_participant"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    TOUR_ARCHIVED = "tour_archived"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base domain error."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Domain validation error."""

    kind = ErrorKind.VALIDATION


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    kind = ErrorKind.BUSINESS_RULE


class ForbiddenError(DomainError):
    """Raised when an authenticated user is not entitled to an operation."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvitationNotFoundError(NotFoundError):
    """Invitation is absent or hidden from the caller."""

    def __init__(self, identifier: str):
        super().__init__("Invitation", identifier)


class TourNotFoundError(NotFoundError):
    """Tour is absent or hidden from the caller."""

    def __init__(self, identifier: str):
        super().__init__("Tour", identifier)


class InvitationExpiredError(DomainError):
    """Raised when acting on an invitation past its expiry timestamp."""

    kind = ErrorKind.EXPIRED

    def __init__(self, invitation_id: str):
        self.invitation_id = invitation_id
        super().__init__("This invitation has expired")


class InvitationAlreadyProcessedError(DomainError):
    """Raised when an invitation has already left the pending state."""

    kind = ErrorKind.ALREADY_PROCESSED

    def __init__(self, invitation_id: str, status: str):
        self.invitation_id = invitation_id
        self.status = status
        super().__init__(f"This invitation has already been {status}")


class AlreadyParticipantError(DomainError):
    """Raised when a user is already a participant of the tour.

    Accepting an invitation treats this as a successful outcome.
    """

    kind = ErrorKind.ALREADY_PARTICIPANT

    def __init__(self, tour_id: str, user_id: str):
        self.tour_id = tour_id
        self.user_id = user_id
        super().__init__("You are already a participant of this tour")


class TourArchivedError(DomainError):
    """Raised when mutating an archived tour."""

    kind = ErrorKind.TOUR_ARCHIVED

    def __init__(self, tour_id: str):
        self.tour_id = tour_id
        super().__init__(
            "Cannot modify an archived tour. Archived tours are read-only."
        )


class InternalError(DomainError):
    """Unexpected storage or infrastructure failure.

    The message is safe to show to clients; details are only logged.
    """

    kind = ErrorKind.INTERNAL


class TourStatusVerificationError(InternalError):
    """Raised when the tour status lookup itself fails."""

    def __init__(self, tour_id: str):
        self.tour_id = tour_id
        super().__init__("Failed to verify tour status.")
