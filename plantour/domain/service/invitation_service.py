"""Invitation domain service.

Lifecycle of an invitation::

    pending --accept--> accepted
    pending --decline--> declined
    declined --accept/resend--> accepted / pending

A pending invitation whose ``expires_at`` has passed is effectively expired.
That state is computed on every read and never stored.

Every status transition is a conditional write (compare-and-swap on the
stored status). When two requests race on one invitation, such as accept
against cancel, the first committed write wins and the other re-reads the
row to report what happened. Participant rows rely on the (tour, user)
unique constraint instead, so concurrent accepts cannot create duplicates.
"""

from collections.abc import Sequence
from datetime import datetime, timedelta
from uuid import uuid4

import logfire
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from plantour.config import InvitationSettings
from plantour.domain.error import (
    AlreadyParticipantError,
    BusinessRuleViolationError,
    ForbiddenError,
    InternalError,
    InvitationAlreadyProcessedError,
    InvitationExpiredError,
    InvitationNotFoundError,
    TourNotFoundError,
    ValidationError,
)
from plantour.domain.model import Invitation, Profile, Tour
from plantour.domain.model.common import utcnow
from plantour.domain.repository import InvitationRepository, ProfileRepository
from plantour.domain.value import (
    AcceptOutcome,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    Pagination,
    TourId,
    UserId,
)
from plantour.util.email import mask_email, normalize_email, validate_email

from .base import Service, storage_errors
from .participant_service import ParticipantService
from .tour_status_service import TourStatusService


class FailedEmail(BaseModel):
    """An address that could not be invited, with the reason."""

    email: str
    error: str


class SendInvitationsResult(BaseModel):
    """Per-email outcome of a send batch."""

    sent: list[str] = []
    skipped: list[str] = []
    errors: list[FailedEmail] = []
    invitations: list[Invitation] = []


class InvitationDetails(BaseModel):
    """Invitation together with the data needed to present it."""

    invitation: Invitation
    tour: Tour
    inviter: Profile | None = None
    is_expired: bool


class AcceptResult(BaseModel):
    """Outcome of accepting an invitation."""

    invitation: Invitation
    outcome: AcceptOutcome

    @property
    def tour_id(self) -> TourId:
        return self.invitation.tour_id


class InvitationService(Service):
    """Domain service for the invitation lifecycle."""

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        profile_repository: ProfileRepository,
        participant_service: ParticipantService,
        tour_status_service: TourStatusService,
        settings: InvitationSettings,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            profile_repository: Profile repository (inviter details)
            participant_service: Participant domain service
            tour_status_service: Tour status guard
            settings: Invitation settings
        """
        self.invitation_repository = invitation_repository
        self.profile_repository = profile_repository
        self.participant_service = participant_service
        self.tour_status_service = tour_status_service
        self.settings = settings

    # ------------------------------------------------------------------
    # Issuing
    # ------------------------------------------------------------------

    async def send_invitations(
        self, tour_id: TourId, inviter_id: UserId, emails: Sequence[str]
    ) -> SendInvitationsResult:
        """Invite a batch of email addresses to a tour.

        Each address is handled on its own: an invalid address or a failed
        insert is reported in ``errors`` and the rest of the batch proceeds.
        Addresses with an active or accepted invitation, and addresses of
        current participants, are skipped. A declined or expired invitation
        for the same address is re-issued in place.

        Args:
            tour_id: Tour to invite to
            inviter_id: User sending the invitations (must own the tour)
            emails: Raw recipient addresses

        Returns:
            Sent, skipped and failed addresses plus the issued invitations

        Raises:
            TourNotFoundError: If the tour does not exist or is hidden
            ForbiddenError: If the inviter participates but does not own it
            TourArchivedError: If the tour is archived
        """
        with logfire.span(
            "invitation_service.send_invitations",
            tour_id=str(tour_id),
            inviter_id=str(inviter_id),
            count=len(emails),
        ):
            tour = await self.tour_status_service.ensure_not_archived(tour_id)
            if not tour.is_owned_by(inviter_id):
                with storage_errors("send_invitations", "Failed to send invitations"):
                    participant = await self.participant_service.is_participant(
                        tour_id, inviter_id
                    )
                if participant:
                    raise ForbiddenError("Only the tour owner can send invitations")
                raise TourNotFoundError(str(tour_id))

            result = SendInvitationsResult()
            candidates: list[str] = []
            for raw in emails:
                error = validate_email(raw.strip())
                if error is not None:
                    result.errors.append(FailedEmail(email=raw, error=error.value))
                    continue
                email = normalize_email(raw)
                if email not in candidates:
                    candidates.append(email)

            if not candidates:
                return result

            with storage_errors("send_invitations", "Failed to send invitations"):
                participant_emails = await self.participant_service.participant_emails(
                    tour_id
                )

            now = utcnow()
            for email in candidates:
                if email in participant_emails:
                    logfire.info(
                        "Skipping participant email",
                        tour_id=str(tour_id),
                        email=mask_email(email),
                    )
                    result.skipped.append(email)
                    continue

                try:
                    with storage_errors("send_invitation", "Failed to create invitation"):
                        invitation = await self._issue(tour, inviter_id, email, now)
                except InternalError as e:
                    result.errors.append(FailedEmail(email=email, error=e.message))
                    continue

                if invitation is None:
                    result.skipped.append(email)
                else:
                    result.sent.append(email)
                    result.invitations.append(invitation)

            logfire.info(
                "Invitations processed",
                tour_id=str(tour_id),
                sent=len(result.sent),
                skipped=len(result.skipped),
                errors=len(result.errors),
            )
            return result

    async def _issue(
        self, tour: Tour, inviter_id: UserId, email: str, now: datetime
    ) -> Invitation | None:
        """Create or re-issue the invitation for one address.

        Returns:
            The pending invitation, or None if the address is skipped
        """
        existing = await self.invitation_repository.find_by_tour_and_email(
            tour.id, email
        )
        if existing is not None and not existing.is_resendable(now):
            logfire.info(
                "Skipping already invited email",
                tour_id=str(tour.id),
                email=mask_email(email),
                status=existing.status.value,
            )
            return None

        token = await self._generate_token()
        expires_at = now + timedelta(days=self.settings.expiry_days)

        if existing is not None:
            reissued = existing.model_copy(
                update={
                    "inviter_id": inviter_id,
                    "status": InvitationStatus.PENDING,
                    "token": token,
                    "expires_at": expires_at,
                }
            )
            saved = await self.invitation_repository.update_if_status(
                reissued, (existing.status,)
            )
            if saved is None:
                logfire.warn(
                    "Invitation changed while re-issuing",
                    invitation_id=str(existing.id),
                )
                return None
            logfire.info(
                "Invitation re-issued",
                invitation_id=str(saved.id),
                token=token.prefix,
            )
            return saved

        invitation = Invitation(
            id=InvitationId(uuid4()),
            tour_id=tour.id,
            inviter_id=inviter_id,
            email=email,
            status=InvitationStatus.PENDING,
            token=token,
            created_at=now,
            expires_at=expires_at,
        )
        try:
            saved = await self.invitation_repository.save(invitation)
        except IntegrityError:
            # A concurrent send for the same address inserted first
            winner = await self.invitation_repository.find_by_tour_and_email(
                tour.id, email
            )
            if winner is None:
                raise
            logfire.info(
                "Skipping concurrently invited email",
                tour_id=str(tour.id),
                email=mask_email(email),
            )
            return None

        logfire.info(
            "Invitation created",
            invitation_id=str(saved.id),
            tour_id=str(tour.id),
            token=token.prefix,
        )
        return saved

    async def _generate_token(self) -> InvitationToken:
        """Generate a token not yet assigned to any invitation."""
        for _ in range(self.settings.token_attempts):
            token = InvitationToken.generate()
            if not await self.invitation_repository.token_exists(token):
                return token

        logfire.error(
            "Could not generate a unique invitation token",
            attempts=self.settings.token_attempts,
        )
        raise InternalError("Failed to generate invitation token")

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    async def get_by_token(self, token: InvitationToken) -> InvitationDetails:
        """Look up an invitation from its link token.

        Public: no authentication is required to view an invitation.

        Raises:
            InvitationNotFoundError: If no invitation has this token
        """
        with logfire.span("invitation_service.get_by_token", token=token.prefix):
            with storage_errors("get_by_token", "Failed to load invitation"):
                invitation = await self.invitation_repository.find_by_token(token)
                if invitation is None:
                    logfire.warn("Invitation not found", token=token.prefix)
                    raise InvitationNotFoundError(token.prefix)

                details = await self.describe([invitation])
            return details[0]

    async def describe(self, invitations: list[Invitation]) -> list[InvitationDetails]:
        """Attach tour and inviter data to invitations."""
        now = utcnow()
        tours: dict[TourId, Tour] = {}
        for invitation in invitations:
            if invitation.tour_id not in tours:
                tours[invitation.tour_id] = await self.tour_status_service.get_tour(
                    invitation.tour_id
                )

        inviter_ids = list({invitation.inviter_id for invitation in invitations})
        profiles = {
            profile.id: profile
            for profile in await self.profile_repository.find_by_ids(inviter_ids)
        }

        return [
            InvitationDetails(
                invitation=invitation,
                tour=tours[invitation.tour_id],
                inviter=profiles.get(invitation.inviter_id),
                is_expired=invitation.is_expired(now),
            )
            for invitation in invitations
        ]

    async def list_pending_for_email(self, email: str) -> list[Invitation]:
        """Pending, unexpired invitations addressed to an email, newest first."""
        with logfire.span(
            "invitation_service.list_pending_for_email", email=mask_email(email)
        ):
            with storage_errors("list_pending_for_email", "Failed to load invitations"):
                invitations = await self.invitation_repository.find_pending_by_email(
                    normalize_email(email), utcnow()
                )
            logfire.info(
                "Pending invitations listed",
                email=mask_email(email),
                count=len(invitations),
            )
            return invitations

    async def list_for_tour(
        self, tour_id: TourId, caller_id: UserId, page: int = 1, limit: int = 20
    ) -> tuple[list[Invitation], Pagination]:
        """List a tour's invitations for its owner, newest first.

        Raises:
            TourNotFoundError: If the tour does not exist or is hidden
            ForbiddenError: If the caller participates but does not own it
        """
        with logfire.span(
            "invitation_service.list_for_tour",
            tour_id=str(tour_id),
            caller_id=str(caller_id),
            page=page,
            limit=limit,
        ):
            limit = min(limit, self.settings.max_page_size)
            tour = await self.tour_status_service.get_tour(tour_id)
            with storage_errors("list_for_tour", "Failed to load invitations"):
                if not tour.is_owned_by(caller_id):
                    if await self.participant_service.is_participant(
                        tour_id, caller_id
                    ):
                        raise ForbiddenError(
                            "Only the tour owner can view invitations"
                        )
                    raise TourNotFoundError(str(tour_id))

                pagination = Pagination(page=page, limit=limit)
                invitations = await self.invitation_repository.find_by_tour(
                    tour_id, limit=pagination.limit, offset=pagination.offset
                )
                total = await self.invitation_repository.count_by_tour(tour_id)

            return invitations, pagination.model_copy(update={"total": total})

    # ------------------------------------------------------------------
    # Responding
    # ------------------------------------------------------------------

    async def accept(
        self,
        invitation_id: InvitationId,
        token: InvitationToken | None,
        acting_user_id: UserId,
        acting_user_email: str,
    ) -> AcceptResult:
        """Accept an invitation and join the tour.

        Re-accepting an invitation the caller has already accepted, or
        losing a concurrent accept race, reports ``already_participant``
        instead of failing.

        Args:
            invitation_id: Invitation to accept
            token: Token from the invitation link, if the caller has one
            acting_user_id: Authenticated user
            acting_user_email: Email of the authenticated user

        Returns:
            Accepted invitation and how the accept was resolved

        Raises:
            InvitationNotFoundError: If the invitation does not exist
            InvitationAlreadyProcessedError: If accepted by someone else
            InvitationExpiredError: If the invitation has expired
            ForbiddenError: If the invitation is addressed to another email
            TourArchivedError: If the tour is archived
            ValidationError: If no token can be resolved
        """
        with logfire.span(
            "invitation_service.accept",
            invitation_id=str(invitation_id),
            user_id=str(acting_user_id),
        ):
            with storage_errors("accept", "Failed to accept invitation"):
                invitation = await self._get(invitation_id)
                if invitation.status == InvitationStatus.ACCEPTED:
                    return await self._already_accepted(
                        invitation, acting_user_id, acting_user_email
                    )

                self._check_respondable(invitation, acting_user_email)
                await self.tour_status_service.ensure_not_archived(invitation.tour_id)
                self._resolve_token(invitation, token)

                accepted = invitation.model_copy(
                    update={"status": InvitationStatus.ACCEPTED, "token": None}
                )
                saved = await self.invitation_repository.update_if_status(
                    accepted, (InvitationStatus.PENDING, InvitationStatus.DECLINED)
                )
                if saved is None:
                    # Lost a race: cancelled (gone) or accepted by a concurrent call
                    current = await self._get(invitation_id)
                    if current.status == InvitationStatus.ACCEPTED:
                        return await self._already_accepted(
                            current, acting_user_id, acting_user_email
                        )
                    raise InvitationAlreadyProcessedError(
                        str(invitation_id), current.status.value
                    )

                try:
                    await self.participant_service.add_participant(
                        saved.tour_id, acting_user_id
                    )
                except AlreadyParticipantError:
                    return AcceptResult(
                        invitation=saved, outcome=AcceptOutcome.ALREADY_PARTICIPANT
                    )

            logfire.info(
                "Invitation accepted",
                invitation_id=str(invitation_id),
                tour_id=str(saved.tour_id),
                user_id=str(acting_user_id),
            )
            return AcceptResult(invitation=saved, outcome=AcceptOutcome.ACCEPTED)

    async def decline(
        self,
        invitation_id: InvitationId,
        token: InvitationToken | None,
        acting_user_id: UserId,
        acting_user_email: str,
    ) -> Invitation:
        """Decline an invitation.

        Declining an already declined invitation returns it unchanged.

        Raises:
            InvitationNotFoundError: If the invitation does not exist
            InvitationAlreadyProcessedError: If it was accepted
            InvitationExpiredError: If the invitation has expired
            ForbiddenError: If the invitation is addressed to another email
            TourArchivedError: If the tour is archived
            ValidationError: If no token can be resolved
        """
        with logfire.span(
            "invitation_service.decline",
            invitation_id=str(invitation_id),
            user_id=str(acting_user_id),
        ):
            with storage_errors("decline", "Failed to decline invitation"):
                invitation = await self._get(invitation_id)
                if invitation.status == InvitationStatus.ACCEPTED:
                    raise InvitationAlreadyProcessedError(
                        str(invitation_id), invitation.status.value
                    )

                self._check_respondable(invitation, acting_user_email)
                if invitation.status == InvitationStatus.DECLINED:
                    return invitation

                await self.tour_status_service.ensure_not_archived(invitation.tour_id)
                self._resolve_token(invitation, token)

                declined = invitation.model_copy(
                    update={"status": InvitationStatus.DECLINED, "token": None}
                )
                saved = await self.invitation_repository.update_if_status(
                    declined, (InvitationStatus.PENDING,)
                )
                if saved is None:
                    current = await self._get(invitation_id)
                    if current.status == InvitationStatus.DECLINED:
                        return current
                    raise InvitationAlreadyProcessedError(
                        str(invitation_id), current.status.value
                    )

            logfire.info(
                "Invitation declined",
                invitation_id=str(invitation_id),
                user_id=str(acting_user_id),
            )
            return saved

    # ------------------------------------------------------------------
    # Owner actions
    # ------------------------------------------------------------------

    async def cancel(
        self,
        invitation_id: InvitationId,
        caller_id: UserId,
        caller_email: str | None = None,
    ) -> None:
        """Delete a pending or declined invitation.

        Raises:
            InvitationNotFoundError: If the invitation does not exist or is
                hidden from the caller
            ForbiddenError: If the caller is the invitee, not the owner
            BusinessRuleViolationError: If the invitation was accepted
            TourArchivedError: If the tour is archived
        """
        with logfire.span(
            "invitation_service.cancel",
            invitation_id=str(invitation_id),
            caller_id=str(caller_id),
        ):
            with storage_errors("cancel", "Failed to cancel invitation"):
                invitation = await self._get_as_owner(
                    invitation_id, caller_id, caller_email, action="cancel"
                )
                if invitation.status == InvitationStatus.ACCEPTED:
                    raise BusinessRuleViolationError(
                        "Cannot cancel an accepted invitation"
                    )

                await self.tour_status_service.ensure_not_archived(invitation.tour_id)

                deleted = await self.invitation_repository.delete_if_status(
                    invitation_id,
                    (InvitationStatus.PENDING, InvitationStatus.DECLINED),
                )
                if not deleted:
                    # Lost a race: already deleted, or accepted meanwhile
                    await self._get(invitation_id)
                    raise BusinessRuleViolationError(
                        "Cannot cancel an accepted invitation"
                    )

            logfire.info(
                "Invitation cancelled",
                invitation_id=str(invitation_id),
                caller_id=str(caller_id),
            )

    async def resend(
        self,
        invitation_id: InvitationId,
        caller_id: UserId,
        caller_email: str | None = None,
    ) -> Invitation:
        """Re-issue a declined or expired invitation with a fresh token.

        Raises:
            InvitationNotFoundError: If the invitation does not exist or is
                hidden from the caller
            ForbiddenError: If the caller is the invitee, not the owner
            BusinessRuleViolationError: If accepted or still active
            TourArchivedError: If the tour is archived
        """
        with logfire.span(
            "invitation_service.resend",
            invitation_id=str(invitation_id),
            caller_id=str(caller_id),
        ):
            with storage_errors("resend", "Failed to resend invitation"):
                invitation = await self._get_as_owner(
                    invitation_id, caller_id, caller_email, action="resend"
                )
                now = utcnow()
                if invitation.status == InvitationStatus.ACCEPTED:
                    raise BusinessRuleViolationError(
                        "Cannot resend an accepted invitation"
                    )
                if not invitation.is_resendable(now):
                    raise BusinessRuleViolationError(
                        "Invitation is still active and cannot be resent"
                    )

                await self.tour_status_service.ensure_not_archived(invitation.tour_id)

                token = await self._generate_token()
                reissued = invitation.model_copy(
                    update={
                        "status": InvitationStatus.PENDING,
                        "token": token,
                        "expires_at": now + timedelta(days=self.settings.expiry_days),
                    }
                )
                saved = await self.invitation_repository.update_if_status(
                    reissued, (invitation.status,)
                )
                if saved is None:
                    await self._get(invitation_id)
                    raise BusinessRuleViolationError(
                        "Invitation changed while resending, please retry"
                    )

            logfire.info(
                "Invitation resent",
                invitation_id=str(invitation_id),
                token=token.prefix,
            )
            return saved

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get(self, invitation_id: InvitationId) -> Invitation:
        invitation = await self.invitation_repository.find_by_id(invitation_id)
        if invitation is None:
            logfire.warn("Invitation not found", invitation_id=str(invitation_id))
            raise InvitationNotFoundError(str(invitation_id))
        return invitation

    async def _get_as_owner(
        self,
        invitation_id: InvitationId,
        caller_id: UserId,
        caller_email: str | None,
        action: str,
    ) -> Invitation:
        """Load an invitation the caller must manage as tour owner.

        Only the owner and the invitee can see an invitation. Anyone else
        gets not-found so the invitation's existence is not confirmed.
        """
        invitation = await self._get(invitation_id)
        tour = await self.tour_status_service.get_tour(invitation.tour_id)
        if tour.is_owned_by(caller_id):
            return invitation

        logfire.warn(
            "Non-owner invitation action rejected",
            invitation_id=str(invitation_id),
            caller_id=str(caller_id),
            action=action,
        )
        if invitation.is_addressed_to(caller_email):
            raise ForbiddenError(f"Only the tour owner can {action} invitations")
        raise InvitationNotFoundError(str(invitation_id))

    def _check_respondable(self, invitation: Invitation, acting_user_email: str) -> None:
        """Expiry and recipient checks shared by accept and decline."""
        if invitation.is_expired():
            logfire.info("Invitation expired", invitation_id=str(invitation.id))
            raise InvitationExpiredError(str(invitation.id))

        if not invitation.is_addressed_to(acting_user_email):
            logfire.warn(
                "Invitation email mismatch",
                invitation_id=str(invitation.id),
                acting_email=mask_email(acting_user_email),
            )
            raise ForbiddenError("This invitation was sent to a different email")

    def _resolve_token(
        self, invitation: Invitation, supplied: InvitationToken | None
    ) -> InvitationToken:
        """Token the response is authorized by.

        The stored token wins; a caller-supplied token is only used once
        the stored one has been cleared.
        """
        if invitation.token is not None:
            if supplied is not None and supplied != invitation.token:
                raise ForbiddenError("Invitation token does not match")
            return invitation.token
        if supplied is None:
            raise ValidationError("Invitation token is missing")
        return supplied

    async def _already_accepted(
        self, invitation: Invitation, acting_user_id: UserId, acting_user_email: str
    ) -> AcceptResult:
        """Resolve an accept on an invitation that is already accepted."""
        if invitation.is_addressed_to(
            acting_user_email
        ) and await self.participant_service.is_participant(
            invitation.tour_id, acting_user_id
        ):
            logfire.info(
                "Invitation already accepted by caller",
                invitation_id=str(invitation.id),
                user_id=str(acting_user_id),
            )
            return AcceptResult(
                invitation=invitation, outcome=AcceptOutcome.ALREADY_PARTICIPANT
            )
        raise InvitationAlreadyProcessedError(
            str(invitation.id), invitation.status.value
        )
