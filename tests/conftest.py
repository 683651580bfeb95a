"""Test configuration and helpers."""

from datetime import timedelta
from uuid import uuid4

import pytest_asyncio
from dishka import AsyncContainer
from httpx import ASGITransport, AsyncClient

from plantour.config import AuthSettings
from plantour.domain.model import Invitation, Participant, Profile, Tour
from plantour.domain.model.common import utcnow
from plantour.domain.repository import (
    InvitationRepository,
    ParticipantRepository,
    ProfileRepository,
    TourRepository,
)
from plantour.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationToken,
    TourId,
    TourStatus,
    UserId,
)
from plantour.interface.api.app import create_app
from plantour.util.jwt import create_token
from tests.di import build_test_container


async def seed_profile(
    env: AsyncContainer, email: str, display_name: str | None = None
) -> Profile:
    """Store a profile for a new user."""
    repo = await env.get(ProfileRepository)
    return await repo.save(
        Profile(id=UserId(uuid4()), email=email, display_name=display_name)
    )


async def seed_tour(
    env: AsyncContainer,
    owner: Profile,
    title: str = "Dolomites Hut Trek",
    status: TourStatus = TourStatus.ACTIVE,
) -> Tour:
    """Store a tour owned by ``owner``, who also participates."""
    tour_repo = await env.get(TourRepository)
    participant_repo = await env.get(ParticipantRepository)
    tour = await tour_repo.save(
        Tour(id=TourId(uuid4()), owner_id=owner.id, title=title, status=status)
    )
    await participant_repo.add(Participant(tour_id=tour.id, user_id=owner.id))
    return tour


async def seed_participant(env: AsyncContainer, tour: Tour, user: Profile) -> None:
    repo = await env.get(ParticipantRepository)
    await repo.add(Participant(tour_id=tour.id, user_id=user.id))


async def seed_invitation(
    env: AsyncContainer,
    tour: Tour,
    email: str,
    status: InvitationStatus = InvitationStatus.PENDING,
    expires_in: timedelta = timedelta(days=7),
    with_token: bool = True,
) -> Invitation:
    """Store an invitation directly, bypassing the service rules."""
    repo = await env.get(InvitationRepository)
    now = utcnow()
    return await repo.save(
        Invitation(
            id=InvitationId(uuid4()),
            tour_id=tour.id,
            inviter_id=tour.owner_id,
            email=email,
            status=status,
            token=InvitationToken.generate() if with_token else None,
            created_at=now - timedelta(days=1),
            expires_at=now + expires_in,
        )
    )


def session_cookie(user: Profile, settings: AuthSettings | None = None) -> str:
    """Signed session token for ``user``, as the sign-in flow would issue."""
    return create_token(str(user.id), user.email, settings or AuthSettings())


@pytest_asyncio.fixture
async def api_env():
    """App wired to a mock container, plus an HTTP client for it.

    Yields:
        (client, container). Seed data through ``container``; its
        repositories are the ones the app reads.
    """
    container = build_test_container()
    app = create_app(container)
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client, container

    await container.close()


async def sign_in(client: AsyncClient, user: Profile) -> None:
    """Attach a session cookie and a CSRF token to ``client``."""
    settings = AuthSettings()
    client.cookies.set(settings.cookie_name, session_cookie(user, settings))

    response = await client.get("/csrf-token")
    csrf_token = response.json()["csrf_token"]
    client.cookies.set("csrf-token", csrf_token)
    client.headers["x-csrf-token"] = csrf_token
