"""Request security DI providers."""

from dishka import Scope, provide

from plantour.config import Settings
from plantour.util.di.base import ProviderBase
from plantour.util.ratelimit import FixedWindowRateLimiter, RateLimiters


class ProdSecurityProvider(ProviderBase):
    """Rate limiters shared by every request of the process."""

    @provide(scope=Scope.APP)
    def get_rate_limiters(self, settings: Settings) -> RateLimiters:
        """Provide the send-invitations and general API limiters."""
        config = settings.rate_limit
        return RateLimiters(
            invitations=FixedWindowRateLimiter(
                max_requests=config.invitations_per_window,
                window_seconds=config.window_seconds,
            ),
            api=FixedWindowRateLimiter(
                max_requests=config.api_per_window,
                window_seconds=config.window_seconds,
            ),
            enabled=config.enabled,
        )
