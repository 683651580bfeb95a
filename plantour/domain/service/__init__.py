"""Domain services."""

from .base import Service
from .email_service import (
    EmailDeliveryError,
    EmailSender,
    InvitationEmail,
    InvitationMailer,
)
from .invitation_service import (
    AcceptResult,
    FailedEmail,
    InvitationDetails,
    InvitationService,
    SendInvitationsResult,
)
from .jwt_service import JWTService
from .participant_service import ParticipantService
from .tour_status_service import TourStatusService

__all__ = [
    "AcceptResult",
    "EmailDeliveryError",
    "EmailSender",
    "FailedEmail",
    "InvitationDetails",
    "InvitationEmail",
    "InvitationMailer",
    "InvitationService",
    "JWTService",
    "ParticipantService",
    "SendInvitationsResult",
    "Service",
    "TourStatusService",
]
