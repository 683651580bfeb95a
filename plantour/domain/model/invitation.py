"""Invitation domain model."""

from datetime import datetime

from pydantic import Field

from plantour.domain.model.common import DomainModel, utcnow
from plantour.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationToken,
    TourId,
    UserId,
)


class InvitationActions(DomainModel):
    """Actions a tour owner may take on an invitation."""

    can_cancel: bool = False
    can_resend: bool = False


class Invitation(DomainModel):
    """An offer for one email address to join one tour.

    ``email`` is stored normalized (trimmed, lower-cased). ``token`` is only
    set while the invitation is pending; accepting or declining clears it.
    """

    id: InvitationId
    tour_id: TourId
    inviter_id: UserId
    email: str
    status: InvitationStatus = InvitationStatus.PENDING
    token: InvitationToken | None = None
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the expiry timestamp has passed."""
        return self.expires_at <= (now or utcnow())

    def is_active(self, now: datetime | None = None) -> bool:
        """Pending and not expired, i.e. still redeemable."""
        return self.status == InvitationStatus.PENDING and not self.is_expired(now)

    def is_resendable(self, now: datetime | None = None) -> bool:
        """Declined, or pending but expired."""
        if self.status == InvitationStatus.DECLINED:
            return True
        return self.status == InvitationStatus.PENDING and self.is_expired(now)

    def is_addressed_to(self, email: str | None) -> bool:
        """Case-insensitive match against the recipient address."""
        if not email:
            return False
        return self.email == email.strip().lower()

    def available_actions(
        self, is_owner: bool, now: datetime | None = None
    ) -> InvitationActions:
        """Actions available to the caller for this invitation."""
        if not is_owner:
            return InvitationActions()
        return InvitationActions(
            can_cancel=self.status != InvitationStatus.ACCEPTED,
            can_resend=self.is_resendable(now),
        )
