"""List tour invitations use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from plantour.domain.model.common import utcnow
from plantour.domain.service import InvitationService
from plantour.domain.value import InvitationStatus, Pagination, TourId, UserId


class TourInvitationItem(BaseModel):
    """Invitation row in the owner's invitation list."""

    id: UUID
    email: str
    status: InvitationStatus
    created_at: datetime
    expires_at: datetime
    is_expired: bool
    can_cancel: bool
    can_resend: bool


class ListTourInvitationsRequest(BaseModel):
    """List request. Pages are 1-indexed."""

    tour_id: UUID
    caller_id: UUID
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class ListTourInvitationsResponse(BaseModel):
    data: list[TourInvitationItem]
    pagination: Pagination


class ListTourInvitationsUseCase:
    """Use case for the tour owner's invitation management list."""

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(
        self, request: ListTourInvitationsRequest
    ) -> ListTourInvitationsResponse:
        """List invitations newest first.

        Raises:
            TourNotFoundError: If the tour does not exist or is hidden
            ForbiddenError: If the caller participates but does not own it
        """
        invitations, pagination = await self.invitation_service.list_for_tour(
            TourId(request.tour_id),
            UserId(request.caller_id),
            page=request.page,
            limit=request.limit,
        )

        # Only the owner gets this far
        now = utcnow()
        items = []
        for invitation in invitations:
            actions = invitation.available_actions(is_owner=True, now=now)
            items.append(
                TourInvitationItem(
                    id=invitation.id,
                    email=invitation.email,
                    status=invitation.status,
                    created_at=invitation.created_at,
                    expires_at=invitation.expires_at,
                    is_expired=invitation.is_expired(now),
                    can_cancel=actions.can_cancel,
                    can_resend=actions.can_resend,
                )
            )

        return ListTourInvitationsResponse(data=items, pagination=pagination)
