"""Accept invitation use case."""

from uuid import UUID

from pydantic import BaseModel

from plantour.domain.service import InvitationService
from plantour.domain.value import (
    AcceptOutcome,
    InvitationId,
    InvitationToken,
    UserId,
)

OUTCOME_MESSAGES = {
    AcceptOutcome.ACCEPTED: "Invitation accepted. Welcome to the tour!",
    AcceptOutcome.ALREADY_PARTICIPANT: "You are already a participant of this tour",
}


class AcceptInvitationRequest(BaseModel):
    """Request to accept an invitation as the signed-in user."""

    invitation_id: UUID
    user_id: UUID
    user_email: str
    token: InvitationToken | None = None


class AcceptInvitationResponse(BaseModel):
    """Accept outcome. Both outcomes count as success."""

    tour_id: UUID
    outcome: AcceptOutcome
    message: str


class AcceptInvitationUseCase:
    """Use case for joining a tour through an invitation."""

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(self, request: AcceptInvitationRequest) -> AcceptInvitationResponse:
        """Accept the invitation.

        Raises:
            InvitationNotFoundError: If the invitation does not exist
            InvitationAlreadyProcessedError: If accepted by someone else
            InvitationExpiredError: If the invitation has expired
            ForbiddenError: If addressed to a different email
            TourArchivedError: If the tour is archived
            ValidationError: If no token can be resolved
        """
        result = await self.invitation_service.accept(
            InvitationId(request.invitation_id),
            request.token,
            UserId(request.user_id),
            request.user_email,
        )
        return AcceptInvitationResponse(
            tour_id=result.tour_id,
            outcome=result.outcome,
            message=OUTCOME_MESSAGES[result.outcome],
        )
