"""Decline invitation use case."""

from uuid import UUID

from pydantic import BaseModel

from plantour.domain.service import InvitationService
from plantour.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationToken,
    UserId,
)


class DeclineInvitationRequest(BaseModel):
    """Request to decline an invitation as the signed-in user."""

    invitation_id: UUID
    user_id: UUID
    user_email: str
    token: InvitationToken | None = None


class DeclineInvitationResponse(BaseModel):
    """Declined invitation."""

    id: UUID
    tour_id: UUID
    status: InvitationStatus
    message: str = "Invitation declined"


class DeclineInvitationUseCase:
    """Use case for declining an invitation."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: DeclineInvitationRequest
    ) -> DeclineInvitationResponse:
        invitation = await self.invitation_service.decline(
            InvitationId(request.invitation_id),
            request.token,
            UserId(request.user_id),
            request.user_email,
        )
        return DeclineInvitationResponse(
            id=invitation.id, tour_id=invitation.tour_id, status=invitation.status
        )
