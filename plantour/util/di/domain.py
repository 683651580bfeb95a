"""Domain layer DI providers."""

from dishka import Scope, provide

from plantour.config import APISettings, AuthSettings, InvitationSettings
from plantour.domain.repository import (
    InvitationRepository,
    ParticipantRepository,
    ProfileRepository,
    TourRepository,
)
from plantour.domain.service import (
    EmailSender,
    InvitationMailer,
    InvitationService,
    JWTService,
    ParticipantService,
    TourStatusService,
)
from plantour.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_tour_status_service(
        self, tour_repository: TourRepository
    ) -> TourStatusService:
        """Provide tour status guard."""
        return TourStatusService(tour_repository=tour_repository)

    @provide
    def get_participant_service(
        self,
        participant_repository: ParticipantRepository,
        profile_repository: ProfileRepository,
    ) -> ParticipantService:
        """Provide participant domain service."""
        return ParticipantService(
            participant_repository=participant_repository,
            profile_repository=profile_repository,
        )

    @provide
    def get_invitation_service(
        self,
        invitation_repository: InvitationRepository,
        profile_repository: ProfileRepository,
        participant_service: ParticipantService,
        tour_status_service: TourStatusService,
        settings: InvitationSettings,
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository,
            profile_repository=profile_repository,
            participant_service=participant_service,
            tour_status_service=tour_status_service,
            settings=settings,
        )

    @provide
    def get_invitation_mailer(
        self, email_sender: EmailSender, api_settings: APISettings
    ) -> InvitationMailer:
        """Provide invitation mailer."""
        return InvitationMailer(email_sender=email_sender, api_settings=api_settings)
