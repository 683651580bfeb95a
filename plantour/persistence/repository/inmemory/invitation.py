"""In-memory invitation repository for testing."""

from collections.abc import Collection
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from plantour.domain.model.invitation import Invitation
from plantour.domain.repository.invitation import InvitationRepository
from plantour.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationToken,
    TourId,
)


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing."""

    def __init__(self) -> None:
        self._invitations: list[Invitation] = []

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        for invitation in self._invitations:
            if invitation.id == invitation_id:
                return invitation
        return None

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        for invitation in self._invitations:
            if invitation.token == token:
                return invitation
        return None

    async def find_by_tour_and_email(
        self, tour_id: TourId, email: str
    ) -> Optional[Invitation]:
        matches = [
            inv
            for inv in self._invitations
            if inv.tour_id == tour_id and inv.email == email
        ]
        if not matches:
            return None
        return max(matches, key=lambda inv: inv.created_at)

    async def find_pending_by_email(
        self, email: str, now: datetime
    ) -> list[Invitation]:
        matches = [
            inv
            for inv in self._invitations
            if inv.email == email
            and inv.status == InvitationStatus.PENDING
            and inv.expires_at > now
        ]
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches

    async def find_by_tour(
        self, tour_id: TourId, limit: int = 20, offset: int = 0
    ) -> list[Invitation]:
        matches = [inv for inv in self._invitations if inv.tour_id == tour_id]
        matches.sort(key=lambda inv: inv.created_at, reverse=True)
        return matches[offset : offset + limit]

    async def count_by_tour(self, tour_id: TourId) -> int:
        return sum(1 for inv in self._invitations if inv.tour_id == tour_id)

    async def token_exists(self, token: InvitationToken) -> bool:
        return await self.find_by_token(token) is not None

    async def save(self, invitation: Invitation) -> Invitation:
        """Insert an invitation.

        Raises:
            IntegrityError: If the ID or token is taken, or the address already
                has an invitation for the tour
        """
        for existing in self._invitations:
            if existing.id == invitation.id:
                raise IntegrityError("Duplicate invitation id", None, Exception())
            if (
                existing.tour_id == invitation.tour_id
                and existing.email == invitation.email
            ):
                raise IntegrityError("Duplicate invitation address", None, Exception())
            if invitation.token is not None and existing.token == invitation.token:
                raise IntegrityError("Duplicate invitation token", None, Exception())

        self._invitations.append(invitation)
        return invitation

    async def update_if_status(
        self, invitation: Invitation, expected: Collection[InvitationStatus]
    ) -> Optional[Invitation]:
        for i, existing in enumerate(self._invitations):
            if existing.id == invitation.id:
                if existing.status not in expected:
                    return None
                self._invitations[i] = invitation
                return invitation
        return None

    async def delete_if_status(
        self, invitation_id: InvitationId, expected: Collection[InvitationStatus]
    ) -> bool:
        for i, existing in enumerate(self._invitations):
            if existing.id == invitation_id:
                if existing.status not in expected:
                    return False
                self._invitations.pop(i)
                return True
        return False
