"""In-memory transaction for testing."""

from sqlalchemy.exc import OperationalError

from plantour.domain.repository.transaction import Transaction


class InMemoryTransaction(Transaction):
    """Counts commits; set ``fail`` to simulate a failing commit."""

    def __init__(self) -> None:
        self.commits = 0
        self.fail = False

    async def commit(self) -> None:
        if self.fail:
            raise OperationalError("COMMIT", {}, Exception("connection lost"))
        self.commits += 1
