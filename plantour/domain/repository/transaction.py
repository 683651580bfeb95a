"""Transaction interface."""

from abc import ABC, abstractmethod


class Transaction(ABC):
    """The request's unit of work.

    Whatever is not committed explicitly is committed when the request ends.
    Use cases commit early when a side effect outside the database, such as
    an email, must only happen once the writes are durable.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Commit the writes made so far.

        Raises:
            SQLAlchemyError: If the commit fails
        """
        pass
