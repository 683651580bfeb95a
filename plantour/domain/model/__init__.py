"""Domain model entities for Plan Tour."""

from plantour.domain.model.invitation import Invitation, InvitationActions
from plantour.domain.model.participant import Participant
from plantour.domain.model.profile import Profile
from plantour.domain.model.tour import Tour

__all__ = [
    "Invitation",
    "InvitationActions",
    "Participant",
    "Profile",
    "Tour",
]
