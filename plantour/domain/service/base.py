"""Base service class for domain services."""

from collections.abc import Iterator
from contextlib import contextmanager

import logfire
from sqlalchemy.exc import SQLAlchemyError

from plantour.domain.error import InternalError


class Service:
    """Base class for all domain services.

    Domain services contain business logic that doesn't naturally belong
    to a single entity or spans multiple entities/aggregates.
    """

    pass


@contextmanager
def storage_errors(operation: str, message: str) -> Iterator[None]:
    """Re-raise storage failures as a generic ``InternalError``.

    The original error is logged with its type only. Driver messages can
    echo bound values such as tokens, so they never reach the log or the
    caller.

    Args:
        operation: Name of the failing operation, for the log record
        message: Client-safe message of the raised error
    """
    try:
        yield
    except SQLAlchemyError as e:
        logfire.error(
            "Storage operation failed",
            operation=operation,
            error_type=type(e).__name__,
            error_code=getattr(e, "code", None),
        )
        raise InternalError(message) from e
