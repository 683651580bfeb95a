"""Email delivery infrastructure providers."""

from dishka import Scope, provide

from plantour.adapter.resend import ConsoleEmailSender, ResendEmailSender
from plantour.config import Settings
from plantour.domain.service import EmailSender
from plantour.util.di.base import ProviderBase
from plantour.util.error import ConfigurationError


class EmailProvider(ProviderBase):
    """Email component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email provider.

    Uses Resend when configured, otherwise logs emails to the console.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_email_sender(self, settings: Settings) -> EmailSender:
        """Provide the configured email sender.

        Raises:
            ConfigurationError: If Resend is selected without an API key
        """
        config = settings.email
        if config.provider == "console":
            return ConsoleEmailSender()

        if not config.api_key:
            raise ConfigurationError("EMAIL__API_KEY is required for Resend")

        return ResendEmailSender(
            api_key=config.api_key,
            from_address=config.from_address,
            api_url=config.api_url,
            timeout=config.timeout_seconds,
        )
