"""List pending invitations use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from plantour.domain.service import InvitationService
from plantour.domain.service.email_service import DEFAULT_INVITER_NAME


class PendingInvitationItem(BaseModel):
    """Pending invitation shown to its recipient."""

    id: UUID
    tour_id: UUID
    tour_title: str
    inviter_name: str
    created_at: datetime
    expires_at: datetime


class ListPendingInvitationsRequest(BaseModel):
    """Pending invitations for the signed-in user's email."""

    email: str


class ListPendingInvitationsResponse(BaseModel):
    data: list[PendingInvitationItem]


class ListPendingInvitationsUseCase:
    """Use case for the invitee's inbox of open invitations."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(
        self, request: ListPendingInvitationsRequest
    ) -> ListPendingInvitationsResponse:
        invitations = await self.invitation_service.list_pending_for_email(
            request.email
        )
        details = await self.invitation_service.describe(invitations)

        return ListPendingInvitationsResponse(
            data=[
                PendingInvitationItem(
                    id=item.invitation.id,
                    tour_id=item.tour.id,
                    tour_title=item.tour.title,
                    inviter_name=(item.inviter.display_name if item.inviter else None)
                    or DEFAULT_INVITER_NAME,
                    created_at=item.invitation.created_at,
                    expires_at=item.invitation.expires_at,
                )
                for item in details
            ]
        )
