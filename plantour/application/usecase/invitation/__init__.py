"""Invitation use cases."""

from plantour.application.usecase.invitation.accept_invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
)
from plantour.application.usecase.invitation.cancel_invitation import (
    CancelInvitationRequest,
    CancelInvitationUseCase,
)
from plantour.application.usecase.invitation.decline_invitation import (
    DeclineInvitationRequest,
    DeclineInvitationResponse,
    DeclineInvitationUseCase,
)
from plantour.application.usecase.invitation.get_invitation_by_token import (
    GetInvitationByTokenRequest,
    GetInvitationByTokenResponse,
    GetInvitationByTokenUseCase,
)
from plantour.application.usecase.invitation.list_pending_invitations import (
    ListPendingInvitationsRequest,
    ListPendingInvitationsResponse,
    ListPendingInvitationsUseCase,
)
from plantour.application.usecase.invitation.list_tour_invitations import (
    ListTourInvitationsRequest,
    ListTourInvitationsResponse,
    ListTourInvitationsUseCase,
)
from plantour.application.usecase.invitation.resend_invitation import (
    ResendInvitationRequest,
    ResendInvitationResponse,
    ResendInvitationUseCase,
)
from plantour.application.usecase.invitation.send_invitations import (
    SendInvitationsRequest,
    SendInvitationsResponse,
    SendInvitationsUseCase,
)

__all__ = [
    "AcceptInvitationRequest",
    "AcceptInvitationResponse",
    "AcceptInvitationUseCase",
    "CancelInvitationRequest",
    "CancelInvitationUseCase",
    "DeclineInvitationRequest",
    "DeclineInvitationResponse",
    "DeclineInvitationUseCase",
    "GetInvitationByTokenRequest",
    "GetInvitationByTokenResponse",
    "GetInvitationByTokenUseCase",
    "ListPendingInvitationsRequest",
    "ListPendingInvitationsResponse",
    "ListPendingInvitationsUseCase",
    "ListTourInvitationsRequest",
    "ListTourInvitationsResponse",
    "ListTourInvitationsUseCase",
    "ResendInvitationRequest",
    "ResendInvitationResponse",
    "ResendInvitationUseCase",
    "SendInvitationsRequest",
    "SendInvitationsResponse",
    "SendInvitationsUseCase",
]
