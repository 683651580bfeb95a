"""Request security: session, CSRF and rate limiting.

Session: a JWT in the auth cookie, issued by the sign-in flow.
CSRF: double-submit cookie. ``GET /csrf-token`` sets the cookie and every
mutating request must echo it in the CSRF header.
Rate limiting: fixed windows per user (per client address for public routes).
"""

import secrets
from dataclasses import dataclass
from typing import Literal
from uuid import UUID

import logfire
from dishka.integrations.fastapi import FromDishka, inject
from fastapi import Depends, Request, Response

from plantour.config import Settings
from plantour.domain.service import JWTService
from plantour.interface.error import (
    AuthenticationError,
    CsrfError,
    RateLimitExceededError,
)
from plantour.util.jwt import JWTError
from plantour.util.ratelimit import RateLimitDecision, RateLimiters

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

Bucket = Literal["invitations", "api"]


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller."""

    user_id: UUID
    email: str


@inject
async def get_current_user(
    request: Request,
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> CurrentUser:
    """Resolve the caller from the session cookie.

    Raises:
        AuthenticationError: If the cookie is missing or invalid
    """
    auth_token = request.cookies.get(settings.auth.cookie_name)
    if not auth_token:
        raise AuthenticationError("Not authenticated")

    try:
        payload = jwt_service.verify_token(auth_token)
        user_id = UUID(payload.user_id)
    except (JWTError, ValueError) as e:
        raise AuthenticationError("Invalid session") from e

    return CurrentUser(user_id=user_id, email=payload.email)


def generate_csrf_token() -> str:
    """32 random bytes, hex encoded."""
    return secrets.token_hex(32)


@inject
async def verify_csrf(request: Request, settings: FromDishka[Settings]) -> None:
    """Reject mutating requests whose CSRF header does not match the cookie.

    Raises:
        CsrfError: If the cookie or header is missing, or they differ
    """
    if request.method in SAFE_METHODS:
        return

    cookie = request.cookies.get(settings.security.csrf_cookie_name)
    header = request.headers.get(settings.security.csrf_header_name)
    if not cookie or not header or not secrets.compare_digest(cookie, header):
        logfire.warn(
            "CSRF validation failed",
            method=request.method,
            path=request.url.path,
            has_cookie=bool(cookie),
            has_header=bool(header),
        )
        raise CsrfError("Invalid CSRF token")


def rate_limit_headers(decision: RateLimitDecision) -> dict[str, str]:
    """Headers describing the caller's remaining budget."""
    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(int(decision.reset_at)),
    }
    if not decision.allowed:
        headers["Retry-After"] = str(decision.retry_after)
    return headers


def _enforce(
    limiters: RateLimiters, bucket: Bucket, key: str, response: Response
) -> None:
    if not limiters.enabled:
        return

    limiter = limiters.invitations if bucket == "invitations" else limiters.api
    decision = limiter.hit(f"{bucket}:{key}")
    if not decision.allowed:
        logfire.warn("Rate limit exceeded", bucket=bucket, key=key)
        raise RateLimitExceededError(decision)
    response.headers.update(rate_limit_headers(decision))


def rate_limited_user(bucket: Bucket = "api"):
    """Dependency factory: authenticate, then count against ``bucket``."""

    @inject
    async def dependency(
        request: Request,
        response: Response,
        limiters: FromDishka[RateLimiters],
        user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        _enforce(limiters, bucket, str(user.user_id), response)
        return user

    return dependency


@inject
async def rate_limited_client(
    request: Request,
    response: Response,
    limiters: FromDishka[RateLimiters],
) -> None:
    """Rate limit for public routes, keyed by client address."""
    host = request.client.host if request.client else "unknown"
    _enforce(limiters, "api", host, response)
