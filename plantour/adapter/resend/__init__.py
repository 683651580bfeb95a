"""Resend email adapter."""

from .client import (
    ConsoleEmailSender,
    MockEmailSender,
    ResendEmailSender,
    ResendError,
)

__all__ = [
    "ConsoleEmailSender",
    "MockEmailSender",
    "ResendEmailSender",
    "ResendError",
]
