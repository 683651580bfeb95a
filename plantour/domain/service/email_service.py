"""Invitation email delivery."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from plantour.config import APISettings
from plantour.domain.model import Invitation, Profile, Tour
from plantour.util.email import mask_email

from .base import Service

DEFAULT_INVITER_NAME = "A tour organizer"


class EmailDeliveryError(Exception):
    """Raised by email senders when a message could not be delivered."""

    pass


class InvitationEmail(BaseModel):
    """Content of an invitation email."""

    to: str
    inviter_name: str
    tour_title: str
    invitation_url: str
    expires_at: datetime


class EmailSender:
    """Interface for outbound email providers."""

    async def send_invitation(self, message: InvitationEmail) -> None:
        """Deliver an invitation email.

        Args:
            message: Email to deliver

        Raises:
            EmailDeliveryError: If the provider rejects or cannot be reached
        """
        raise NotImplementedError


class InvitationMailer(Service):
    """Builds invitation emails and hands them to the configured sender.

    Delivery is best effort: a failure is logged and reported to the caller
    but never undoes the invitation.
    """

    def __init__(self, email_sender: EmailSender, api_settings: APISettings) -> None:
        """Initialize invitation mailer.

        Args:
            email_sender: Outbound email provider
            api_settings: API settings (frontend URL for links)
        """
        self.email_sender = email_sender
        self.api_settings = api_settings

    def invitation_url(self, invitation: Invitation) -> str:
        """Link the recipient opens to view the invitation."""
        if invitation.token is None:
            raise ValueError("Invitation has no token to link to")
        return f"{self.api_settings.frontend_url}/invite?token={invitation.token.root}"

    async def send_invitation(
        self, invitation: Invitation, tour: Tour, inviter: Profile | None
    ) -> bool:
        """Send the invitation email.

        Returns:
            True if the provider accepted the message
        """
        with logfire.span(
            "invitation_mailer.send_invitation",
            invitation_id=str(invitation.id),
            to=mask_email(invitation.email),
        ):
            message = InvitationEmail(
                to=invitation.email,
                inviter_name=(inviter.display_name if inviter else None)
                or DEFAULT_INVITER_NAME,
                tour_title=tour.title,
                invitation_url=self.invitation_url(invitation),
                expires_at=invitation.expires_at,
            )
            try:
                await self.email_sender.send_invitation(message)
            except EmailDeliveryError as e:
                logfire.error(
                    "Invitation email failed",
                    invitation_id=str(invitation.id),
                    to=mask_email(invitation.email),
                    error=str(e),
                )
                return False

            logfire.info(
                "Invitation email sent",
                invitation_id=str(invitation.id),
                to=mask_email(invitation.email),
            )
            return True
