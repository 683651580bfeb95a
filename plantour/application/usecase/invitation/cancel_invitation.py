"""Cancel invitation use case."""

from uuid import UUID

from pydantic import BaseModel

from plantour.domain.service import InvitationService
from plantour.domain.value import InvitationId, UserId


class CancelInvitationRequest(BaseModel):
    """Request by a tour owner to withdraw an invitation."""

    invitation_id: UUID
    caller_id: UUID
    caller_email: str | None = None


class CancelInvitationUseCase:
    """Use case for cancelling (deleting) an unaccepted invitation."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: CancelInvitationRequest) -> None:
        """Delete the invitation.

        Raises:
            InvitationNotFoundError: If missing or hidden from the caller
            ForbiddenError: If the caller is the invitee
            BusinessRuleViolationError: If the invitation was accepted
            TourArchivedError: If the tour is archived
        """
        await self.invitation_service.cancel(
            InvitationId(request.invitation_id),
            UserId(request.caller_id),
            request.caller_email,
        )
