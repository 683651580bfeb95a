"""Resend invitation use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel

from plantour.domain.repository import Transaction
from plantour.domain.service import InvitationMailer, InvitationService
from plantour.domain.service.base import storage_errors
from plantour.domain.value import InvitationId, InvitationStatus, UserId


class ResendInvitationRequest(BaseModel):
    """Request by a tour owner to re-issue an invitation."""

    invitation_id: UUID
    caller_id: UUID
    caller_email: str | None = None


class ResendInvitationResponse(BaseModel):
    """Re-issued invitation."""

    id: UUID
    email: str
    status: InvitationStatus
    expires_at: datetime
    email_sent: bool


class ResendInvitationUseCase:
    """Use case for re-issuing a declined or expired invitation."""

    def __init__(
        self,
        invitation_service: InvitationService,
        invitation_mailer: InvitationMailer,
        transaction: Transaction,
    ) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
            invitation_mailer: Invitation email delivery
            transaction: Request transaction, committed before the email goes out
        """
        self.invitation_service = invitation_service
        self.invitation_mailer = invitation_mailer
        self.transaction = transaction

    async def execute(self, request: ResendInvitationRequest) -> ResendInvitationResponse:
        """Re-issue the invitation with a fresh token and email it again.

        Raises:
            InvitationNotFoundError: If missing or hidden from the caller
            ForbiddenError: If the caller is the invitee
            BusinessRuleViolationError: If accepted or still active
            TourArchivedError: If the tour is archived
            InternalError: If the new token could not be committed
        """
        with logfire.span("resend_invitation", invitation_id=str(request.invitation_id)):
            invitation = await self.invitation_service.resend(
                InvitationId(request.invitation_id),
                UserId(request.caller_id),
                request.caller_email,
            )

            [details] = await self.invitation_service.describe([invitation])
            with storage_errors("resend_invitation", "Failed to resend invitation"):
                await self.transaction.commit()

            email_sent = await self.invitation_mailer.send_invitation(
                invitation, details.tour, details.inviter
            )

            return ResendInvitationResponse(
                id=invitation.id,
                email=invitation.email,
                status=invitation.status,
                expires_at=invitation.expires_at,
                email_sent=email_sent,
            )
