"""Interface layer errors."""

from plantour.util.ratelimit import RateLimitDecision


class InterfaceError(Exception):
    """Base interface error."""

    pass


class AuthenticationError(InterfaceError):
    """Missing or invalid session."""

    pass


class CsrfError(InterfaceError):
    """Mutating request without a matching CSRF token."""

    pass


class RateLimitExceededError(InterfaceError):
    """Request budget for the current window is used up."""

    def __init__(self, decision: RateLimitDecision):
        self.decision = decision
        super().__init__("Too many requests. Please try again later.")
