"""PostgreSQL implementation of Invitation repository."""

from collections.abc import Collection
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from plantour.domain.model import Invitation
from plantour.domain.repository import InvitationRepository
from plantour.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationToken,
    TourId,
)
from plantour.persistence.mappers import invitation_to_dict, row_to_invitation
from plantour.persistence.tables import invitations_table


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by its token.

        The value object's ``.root`` is what gets bound, not the wrapper.
        """
        stmt = select(invitations_table).where(invitations_table.c.token == token.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_tour_and_email(
        self, tour_id: TourId, email: str
    ) -> Optional[Invitation]:
        stmt = (
            select(invitations_table)
            .where(
                and_(
                    invitations_table.c.tour_id == tour_id,
                    invitations_table.c.email == email,
                )
            )
            .order_by(invitations_table.c.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_pending_by_email(
        self, email: str, now: datetime
    ) -> list[Invitation]:
        stmt = (
            select(invitations_table)
            .where(
                and_(
                    invitations_table.c.email == email,
                    invitations_table.c.status == InvitationStatus.PENDING.value,
                    invitations_table.c.expires_at > now,
                )
            )
            .order_by(invitations_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def find_by_tour(
        self, tour_id: TourId, limit: int = 20, offset: int = 0
    ) -> list[Invitation]:
        stmt = (
            select(invitations_table)
            .where(invitations_table.c.tour_id == tour_id)
            .order_by(invitations_table.c.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def count_by_tour(self, tour_id: TourId) -> int:
        stmt = (
            select(func.count())
            .select_from(invitations_table)
            .where(invitations_table.c.tour_id == tour_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def token_exists(self, token: InvitationToken) -> bool:
        stmt = select(invitations_table.c.id).where(
            invitations_table.c.token == token.root
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def save(self, invitation: Invitation) -> Invitation:
        """Insert an invitation.

        Runs in a SAVEPOINT so a constraint violation only discards this
        insert, not the whole request transaction.
        """
        async with self.session.begin_nested():
            stmt = insert(invitations_table).values(**invitation_to_dict(invitation))
            await self.session.execute(stmt)
        return invitation

    async def update_if_status(
        self, invitation: Invitation, expected: Collection[InvitationStatus]
    ) -> Optional[Invitation]:
        """Conditional update: a single UPDATE ... WHERE status IN (...).

        Row locking makes a concurrent writer wait for this transaction and
        then re-check the status predicate, so at most one of them matches.
        """
        values = invitation_to_dict(invitation)
        values.pop("id")
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation.id,
                    invitations_table.c.status.in_([s.value for s in expected]),
                )
            )
            .values(**values)
            .returning(*invitations_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        await self.session.flush()
        return row_to_invitation(dict(row)) if row else None

    async def delete_if_status(
        self, invitation_id: InvitationId, expected: Collection[InvitationStatus]
    ) -> bool:
        stmt = delete(invitations_table).where(
            and_(
                invitations_table.c.id == invitation_id,
                invitations_table.c.status.in_([s.value for s in expected]),
            )
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
