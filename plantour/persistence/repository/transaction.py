"""PostgreSQL transaction."""

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from plantour.domain.repository import Transaction


class PostgresTransaction(Transaction):
    """Commits the request's session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()
        logfire.debug("Session committed early")
