"""Profile domain model."""

from plantour.domain.model.common import DomainModel
from plantour.domain.value import UserId


class Profile(DomainModel):
    """Public profile of a user."""

    id: UserId
    email: str
    display_name: str | None = None
