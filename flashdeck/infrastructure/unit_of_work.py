"""SQLAlchemy implementation of the Unit of Work port."""

from collections.abc import Iterable
from types import TracebackType

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashdeck.application.common.unit_of_work import EventHandler, UnitOfWork
from flashdeck.exceptions import StorageError


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Unit of Work bound to one SQLAlchemy session.

    Repositories created on the same session only flush; this class owns
    commit and rollback. Driver errors raised inside the ``with`` block
    leave it as StorageError after the rollback.
    """

    def __init__(self, db: Session, event_handlers: Iterable[EventHandler] | None = None) -> None:
        """
        Initialize unit of work.

        Args:
            db: SQLAlchemy database session shared with the repositories
            event_handlers: Handlers called synchronously after each commit
        """
        super().__init__()
        self.db = db
        for handler in event_handlers or ():
            self.register_event_handler(handler)

    def _commit(self) -> None:
        self.db.commit()

    def _rollback(self) -> None:
        self.db.rollback()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        super().__exit__(exc_type, exc_val, exc_tb)
        if isinstance(exc_val, SQLAlchemyError):
            raise StorageError(str(exc_val)) from exc_val
