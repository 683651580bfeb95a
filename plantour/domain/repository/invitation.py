"""Invitation repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from datetime import datetime

from plantour.domain.model.invitation import Invitation
from plantour.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationToken,
    TourId,
)


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    Status transitions go through the conditional methods
    (``update_if_status`` / ``delete_if_status``) so that concurrent
    writers cannot both succeed on the same invitation.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Invitation | None:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: InvitationToken) -> Invitation | None:
        """Find an invitation by exact token match.

        Args:
            token: The invitation token

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_tour_and_email(
        self, tour_id: TourId, email: str
    ) -> Invitation | None:
        """Find the most recent invitation for a tour and normalized email.

        Args:
            tour_id: Tour the invitation belongs to
            email: Normalized recipient email

        Returns:
            The newest matching invitation, None if there is none
        """
        pass

    @abstractmethod
    async def find_pending_by_email(
        self, email: str, now: datetime
    ) -> list[Invitation]:
        """Find pending, unexpired invitations addressed to an email.

        Args:
            email: Normalized recipient email
            now: Reference time for the expiry comparison

        Returns:
            Matching invitations, newest first
        """
        pass

    @abstractmethod
    async def find_by_tour(
        self, tour_id: TourId, limit: int = 20, offset: int = 0
    ) -> list[Invitation]:
        """Find invitations of a tour with pagination, newest first."""
        pass

    @abstractmethod
    async def count_by_tour(self, tour_id: TourId) -> int:
        """Count all invitations of a tour."""
        pass

    @abstractmethod
    async def token_exists(self, token: InvitationToken) -> bool:
        """Check whether a token is already assigned to an invitation."""
        pass

    @abstractmethod
    async def save(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation.

        Args:
            invitation: The invitation to insert

        Returns:
            The saved invitation

        Raises:
            IntegrityError: If the ID or token is taken, or the address already
                has an invitation for the tour
        """
        pass

    @abstractmethod
    async def update_if_status(
        self, invitation: Invitation, expected: Collection[InvitationStatus]
    ) -> Invitation | None:
        """Overwrite an invitation only if its stored status is expected.

        Args:
            invitation: New state of the invitation
            expected: Stored statuses that allow the write

        Returns:
            The updated invitation, or None if the row is gone or its
            status is not one of ``expected``
        """
        pass

    @abstractmethod
    async def delete_if_status(
        self, invitation_id: InvitationId, expected: Collection[InvitationStatus]
    ) -> bool:
        """Delete an invitation only if its stored status is expected.

        Returns:
            True if a row was deleted
        """
        pass
