"""Get invitation by token use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from plantour.domain.service import InvitationService
from plantour.domain.service.email_service import DEFAULT_INVITER_NAME
from plantour.domain.value import InvitationStatus, InvitationToken, TourStatus


class GetInvitationByTokenRequest(BaseModel):
    """Lookup request from an invitation link."""

    token: InvitationToken


class GetInvitationByTokenResponse(BaseModel):
    """What an invitation link shows before the visitor signs in."""

    id: UUID
    tour_id: UUID
    tour_title: str
    tour_status: TourStatus
    inviter_name: str
    inviter_email: str | None
    email: str
    status: InvitationStatus
    expires_at: datetime
    is_expired: bool


class GetInvitationByTokenUseCase:
    """Use case for the public invitation landing page."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: GetInvitationByTokenRequest
    ) -> GetInvitationByTokenResponse:
        """Resolve the token to invitation details.

        Raises:
            InvitationNotFoundError: If no invitation carries the token
        """
        details = await self.invitation_service.get_by_token(request.token)
        invitation = details.invitation
        inviter = details.inviter

        return GetInvitationByTokenResponse(
            id=invitation.id,
            tour_id=invitation.tour_id,
            tour_title=details.tour.title,
            tour_status=details.tour.status,
            inviter_name=(inviter.display_name if inviter else None)
            or DEFAULT_INVITER_NAME,
            inviter_email=inviter.email if inviter else None,
            email=invitation.email,
            status=invitation.status,
            expires_at=invitation.expires_at,
            is_expired=details.is_expired,
        )
