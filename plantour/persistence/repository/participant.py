"""PostgreSQL implementation of Participant repository."""

from sqlalchemy import and_, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from plantour.domain.model import Participant
from plantour.domain.repository import ParticipantRepository
from plantour.domain.value import TourId, UserId
from plantour.persistence.mappers import participant_to_dict, row_to_participant
from plantour.persistence.tables import participants_table


class PostgresParticipantRepository(ParticipantRepository):
    """PostgreSQL implementation of ParticipantRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def add(self, participant: Participant) -> Participant:
        """Insert a participant.

        The insert runs in a SAVEPOINT: a duplicate (tour, user) raises
        IntegrityError without aborting the surrounding transaction, so the
        caller can still commit the invitation status change.
        """
        async with self.session.begin_nested():
            stmt = insert(participants_table).values(
                **participant_to_dict(participant)
            )
            await self.session.execute(stmt)
        return participant

    async def exists(self, tour_id: TourId, user_id: UserId) -> bool:
        stmt = select(participants_table.c.user_id).where(
            and_(
                participants_table.c.tour_id == tour_id,
                participants_table.c.user_id == user_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def find_by_tour(self, tour_id: TourId) -> list[Participant]:
        stmt = (
            select(participants_table)
            .where(participants_table.c.tour_id == tour_id)
            .order_by(participants_table.c.joined_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_participant(dict(row)) for row in result.mappings().all()]
