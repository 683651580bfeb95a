"""PostgreSQL implementation of Tour repository."""

from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from plantour.domain.model import Tour
from plantour.domain.repository import TourRepository
from plantour.domain.value import TourId
from plantour.persistence.mappers import row_to_tour, tour_to_dict
from plantour.persistence.tables import tours_table


class PostgresTourRepository(TourRepository):
    """PostgreSQL implementation of TourRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, tour_id: TourId) -> Optional[Tour]:
        stmt = select(tours_table).where(tours_table.c.id == tour_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_tour(dict(row)) if row else None

    async def save(self, tour: Tour) -> Tour:
        tour_dict = tour_to_dict(tour)

        existing = await self.find_by_id(tour.id)
        if existing:
            stmt = (
                update(tours_table)
                .where(tours_table.c.id == tour.id)
                .values(**tour_dict)
            )
        else:
            stmt = insert(tours_table).values(**tour_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return tour
