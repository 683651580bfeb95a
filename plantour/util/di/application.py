"""Application layer DI providers."""

from dishka import Scope, provide

from plantour.application.usecase.invitation import (
    AcceptInvitationUseCase,
    CancelInvitationUseCase,
    DeclineInvitationUseCase,
    GetInvitationByTokenUseCase,
    ListPendingInvitationsUseCase,
    ListTourInvitationsUseCase,
    ResendInvitationUseCase,
    SendInvitationsUseCase,
)
from plantour.config import InvitationSettings
from plantour.domain.repository import Transaction
from plantour.domain.service import InvitationMailer, InvitationService
from plantour.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_send_invitations_use_case(
        self,
        invitation_service: InvitationService,
        invitation_mailer: InvitationMailer,
        transaction: Transaction,
        settings: InvitationSettings,
    ) -> SendInvitationsUseCase:
        """Provide send invitations use case."""
        return SendInvitationsUseCase(
            invitation_service=invitation_service,
            invitation_mailer=invitation_mailer,
            transaction=transaction,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_invitation_by_token_use_case(
        self, invitation_service: InvitationService
    ) -> GetInvitationByTokenUseCase:
        """Provide get invitation by token use case."""
        return GetInvitationByTokenUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_accept_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> AcceptInvitationUseCase:
        """Provide accept invitation use case."""
        return AcceptInvitationUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_decline_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> DeclineInvitationUseCase:
        """Provide decline invitation use case."""
        return DeclineInvitationUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_cancel_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> CancelInvitationUseCase:
        """Provide cancel invitation use case."""
        return CancelInvitationUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_resend_invitation_use_case(
        self,
        invitation_service: InvitationService,
        invitation_mailer: InvitationMailer,
        transaction: Transaction,
    ) -> ResendInvitationUseCase:
        """Provide resend invitation use case."""
        return ResendInvitationUseCase(
            invitation_service=invitation_service,
            invitation_mailer=invitation_mailer,
            transaction=transaction,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_pending_invitations_use_case(
        self, invitation_service: InvitationService
    ) -> ListPendingInvitationsUseCase:
        """Provide list pending invitations use case."""
        return ListPendingInvitationsUseCase(invitation_service=invitation_service)

    @provide(scope=Scope.REQUEST)
    def get_list_tour_invitations_use_case(
        self, invitation_service: InvitationService
    ) -> ListTourInvitationsUseCase:
        """Provide list tour invitations use case."""
        return ListTourInvitationsUseCase(invitation_service=invitation_service)
