"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from plantour.domain.model import Invitation, Participant, Profile, Tour
from plantour.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationToken,
    TourId,
    TourStatus,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    Args:
        row: Database row as dict

    Returns:
        Invitation domain model
    """
    return Invitation(
        id=InvitationId(_uuid(row["id"])),
        tour_id=TourId(_uuid(row["tour_id"])),
        inviter_id=UserId(_uuid(row["inviter_id"])),
        email=row["email"],
        status=InvitationStatus(row["status"]),
        token=InvitationToken(root=row["token"]) if row.get("token") else None,
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict.

    The token value object dumps to its plain string (or None).
    """
    data = invitation.model_dump()
    data["status"] = invitation.status.value
    return data


def row_to_participant(row: Dict[str, Any]) -> Participant:
    """Convert database row to Participant domain model."""
    return Participant(
        tour_id=TourId(_uuid(row["tour_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        joined_at=row["joined_at"],
    )


def participant_to_dict(participant: Participant) -> Dict[str, Any]:
    """Convert Participant domain model to database dict."""
    return participant.model_dump()


def row_to_tour(row: Dict[str, Any]) -> Tour:
    """Convert database row to Tour domain model."""
    return Tour(
        id=TourId(_uuid(row["id"])),
        owner_id=UserId(_uuid(row["owner_id"])),
        title=row["title"],
        status=TourStatus(row["status"]),
    )


def tour_to_dict(tour: Tour) -> Dict[str, Any]:
    """Convert Tour domain model to database dict."""
    data = tour.model_dump()
    data["status"] = tour.status.value
    return data


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model."""
    return Profile(
        id=UserId(_uuid(row["id"])),
        email=row["email"],
        display_name=row.get("display_name"),
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict."""
    return profile.model_dump()
