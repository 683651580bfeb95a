"""Tour domain model."""

from plantour.domain.model.common import DomainModel
from plantour.domain.value import TourId, TourStatus, UserId


class Tour(DomainModel):
    """Trip proposal. Only the fields the invitation flow reads."""

    id: TourId
    owner_id: UserId
    title: str
    status: TourStatus = TourStatus.ACTIVE

    @property
    def is_archived(self) -> bool:
        return self.status == TourStatus.ARCHIVED

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.owner_id == user_id
