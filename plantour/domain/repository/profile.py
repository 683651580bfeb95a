"""Profile repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Collection

from plantour.domain.model.profile import Profile
from plantour.domain.value import UserId


class ProfileRepository(ABC):
    """Repository for Profile entity."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Profile | None:
        """Find a profile by user ID."""
        pass

    @abstractmethod
    async def find_by_ids(self, user_ids: Collection[UserId]) -> list[Profile]:
        """Find profiles for several users (batch query)."""
        pass

    @abstractmethod
    async def save(self, profile: Profile) -> Profile:
        """Save a profile (create or update)."""
        pass
