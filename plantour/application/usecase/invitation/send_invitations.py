"""Send invitations use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field, model_validator

from plantour.config import InvitationSettings
from plantour.domain.error import ValidationError
from plantour.domain.repository import Transaction
from plantour.domain.service import (
    FailedEmail,
    InvitationMailer,
    InvitationService,
)
from plantour.domain.service.base import storage_errors
from plantour.domain.value import TourId, UserId
from plantour.util.email import mask_email, parse_emails


class SendInvitationsRequest(BaseModel):
    """Request to invite addresses to a tour.

    Either ``emails`` (already split) or ``text`` (free-form, separated by
    whitespace, commas or semicolons) must be given.
    """

    tour_id: UUID
    inviter_id: UUID
    emails: list[str] | None = None
    text: str | None = None

    @model_validator(mode="after")
    def check_source(self) -> "SendInvitationsRequest":
        if (self.emails is None) == (self.text is None):
            raise ValueError("Provide either emails or text")
        return self


class SendInvitationsResponse(BaseModel):
    """Per-address outcome of a send."""

    sent: list[str] = []
    skipped: list[str] = []
    errors: list[FailedEmail] = []
    duplicates: list[str] = []
    # Invitations that exist but whose email could not be delivered
    email_failures: list[str] = Field(default_factory=list)


class SendInvitationsUseCase:
    """Use case for inviting a batch of addresses to a tour."""

    def __init__(
        self,
        invitation_service: InvitationService,
        invitation_mailer: InvitationMailer,
        transaction: Transaction,
        settings: InvitationSettings,
    ) -> None:
        """Initialize use case.

        Args:
            invitation_service: Invitation domain service
            invitation_mailer: Invitation email delivery
            transaction: Request transaction, committed before any email goes out
            settings: Invitation settings
        """
        self.invitation_service = invitation_service
        self.invitation_mailer = invitation_mailer
        self.transaction = transaction
        self.settings = settings

    async def execute(self, request: SendInvitationsRequest) -> SendInvitationsResponse:
        """Create the invitations, then email each new one.

        The invitations are committed before any email is sent. A failed
        delivery does not undo them and is reported in ``email_failures``.

        Raises:
            ValidationError: If the input is too long, empty or over the
                per-request address limit
            TourNotFoundError: If the tour does not exist or is hidden
            ForbiddenError: If the inviter is not the tour owner
            TourArchivedError: If the tour is archived
            InternalError: If the invitations could not be committed
        """
        tour_id = TourId(request.tour_id)
        inviter_id = UserId(request.inviter_id)

        with logfire.span("send_invitations", tour_id=str(tour_id)):
            response = SendInvitationsResponse()

            if request.text is not None:
                parsed = parse_emails(request.text, self.settings.max_input_length)
                if parsed.input_error:
                    raise ValidationError(parsed.input_error)
                emails = parsed.valid
                response.errors.extend(
                    FailedEmail(email=item.email, error=item.error.value)
                    for item in parsed.invalid
                )
                response.duplicates.extend(parsed.duplicates)
            else:
                emails = list(request.emails or [])

            if not emails and not response.errors:
                raise ValidationError("At least one email address is required")
            if len(emails) > self.settings.max_emails_per_request:
                raise ValidationError(
                    f"Too many email addresses. Maximum "
                    f"{self.settings.max_emails_per_request} per request."
                )

            result = await self.invitation_service.send_invitations(
                tour_id, inviter_id, emails
            )
            response.sent.extend(result.sent)
            response.skipped.extend(result.skipped)
            response.errors.extend(result.errors)

            if result.invitations:
                details = await self.invitation_service.describe(result.invitations)
                with storage_errors("send_invitations", "Failed to send invitations"):
                    await self.transaction.commit()

                for item in details:
                    delivered = await self.invitation_mailer.send_invitation(
                        item.invitation, item.tour, item.inviter
                    )
                    if not delivered:
                        response.email_failures.append(item.invitation.email)

            if response.email_failures:
                logfire.warn(
                    "Some invitation emails were not delivered",
                    tour_id=str(tour_id),
                    failed=[mask_email(email) for email in response.email_failures],
                )

            return response
