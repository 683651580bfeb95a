"""Email senders for invitation emails.

``ResendEmailSender`` delivers through the Resend REST API. The console
sender is used in development; the mock sender records messages for tests.
"""

from html import escape

import httpx
import logfire

from plantour.adapter.error import ProviderError
from plantour.domain.service.email_service import (
    EmailDeliveryError,
    EmailSender,
    InvitationEmail,
)
from plantour.util.email import mask_email


class ResendError(ProviderError, EmailDeliveryError):
    """Resend rejected the message or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("resend", message, status_code)


def render_subject(message: InvitationEmail) -> str:
    return f"{message.inviter_name} invited you to join {message.tour_title}"


def render_text(message: InvitationEmail) -> str:
    expires = message.expires_at.strftime("%Y-%m-%d")
    return (
        f"{message.inviter_name} invited you to join the tour "
        f'"{message.tour_title}" on Plan Tour.\n\n'
        f"Open the invitation: {message.invitation_url}\n\n"
        f"This invitation expires on {expires}."
    )


def render_html(message: InvitationEmail) -> str:
    expires = message.expires_at.strftime("%Y-%m-%d")
    return (
        f"<p>{escape(message.inviter_name)} invited you to join the tour "
        f"<strong>{escape(message.tour_title)}</strong> on Plan Tour.</p>"
        f'<p><a href="{escape(message.invitation_url, quote=True)}">'
        f"Open the invitation</a></p>"
        f"<p>This invitation expires on {expires}.</p>"
    )


class ResendEmailSender(EmailSender):
    """Sends email through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        from_address: str,
        api_url: str = "https://api.resend.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Resend sender.

        Args:
            api_key: Resend API key
            from_address: Sender, e.g. "Plan Tour <invitations@plantour.app>"
            api_url: Resend API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.api_key = api_key
        self.from_address = from_address
        self.emails_url = f"{api_url.rstrip('/')}/emails"
        self.timeout = timeout
        self.transport = transport

    async def send_invitation(self, message: InvitationEmail) -> None:
        """Deliver an invitation email.

        Raises:
            ResendError: If the request fails or Resend answers non-2xx
        """
        payload = {
            "from": self.from_address,
            "to": [message.to],
            "subject": render_subject(message),
            "html": render_html(message),
            "text": render_text(message),
        }

        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    self.emails_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            logfire.error(
                "Resend request failed",
                to=mask_email(message.to),
                error_type=type(e).__name__,
            )
            raise ResendError(f"request failed: {type(e).__name__}") from e

        if response.status_code >= 400:
            logfire.error(
                "Resend rejected email",
                to=mask_email(message.to),
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise ResendError(
                f"HTTP {response.status_code}", status_code=response.status_code
            )

        logfire.info(
            "Resend accepted email",
            to=mask_email(message.to),
            status_code=response.status_code,
        )


class ConsoleEmailSender(EmailSender):
    """Logs emails instead of sending them (local development)."""

    async def send_invitation(self, message: InvitationEmail) -> None:
        logfire.info(
            "Invitation email (console)",
            to=mask_email(message.to),
            subject=render_subject(message),
            tour_title=message.tour_title,
        )


class MockEmailSender(EmailSender):
    """Mock sender for testing.

    Records every message. Set ``fail`` to simulate provider outages.
    """

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[InvitationEmail] = []

    async def send_invitation(self, message: InvitationEmail) -> None:
        if self.fail:
            raise ResendError("mock delivery failure", status_code=503)
        self.sent.append(message)
