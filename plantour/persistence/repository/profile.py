"""PostgreSQL implementation of Profile repository."""

from collections.abc import Collection
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from plantour.domain.model import Profile
from plantour.domain.repository import ProfileRepository
from plantour.domain.value import UserId
from plantour.persistence.mappers import profile_to_dict, row_to_profile
from plantour.persistence.tables import profiles_table


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[Profile]:
        stmt = select(profiles_table).where(profiles_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def find_by_ids(self, user_ids: Collection[UserId]) -> list[Profile]:
        """Find profiles for several users in one query."""
        if not user_ids:
            return []

        stmt = select(profiles_table).where(profiles_table.c.id.in_(list(user_ids)))
        result = await self.session.execute(stmt)
        return [row_to_profile(dict(row)) for row in result.mappings().all()]

    async def save(self, profile: Profile) -> Profile:
        profile_dict = profile_to_dict(profile)

        existing = await self.find_by_id(profile.id)
        if existing:
            stmt = (
                update(profiles_table)
                .where(profiles_table.c.id == profile.id)
                .values(**profile_dict)
            )
        else:
            stmt = insert(profiles_table).values(**profile_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return profile
