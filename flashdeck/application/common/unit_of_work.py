"""
Unit of Work interface.

The Unit of Work pattern maintains a list of objects affected by a business
transaction and coordinates the writing out of changes.

Example:
    class MarkCardKnown:
        def handle(self, deck_id: DeckId, card_id: CardId) -> None:
            with self._uow:
                self._repo.mark_known(deck_id, card_id)
                self._uow.record_event(ProgressChanged(deck_id, card_id=card_id))
                self._uow.commit()
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from types import TracebackType
from typing import Self

from flashdeck.domain.common import DomainEvent

EventHandler = Callable[[DomainEvent], None]


class UnitOfWork(ABC):
    """
    Unit of Work interface (Port).

    The Unit of Work:
    - Manages database transactions
    - Ensures atomicity of operations
    - Dispatches recorded domain events after a successful commit
    - Can be used as a context manager

    Infrastructure layer provides concrete implementations
    (e.g., SqlAlchemyUnitOfWork).
    """

    def __init__(self) -> None:
        self._pending_events: list[DomainEvent] = []
        self._handlers: list[EventHandler] = []

    @abstractmethod
    def _commit(self) -> None:
        """Persist all changes made within the unit of work."""
        raise NotImplementedError

    @abstractmethod
    def _rollback(self) -> None:
        """Discard all changes made within the unit of work."""
        raise NotImplementedError

    def commit(self) -> None:
        """
        Commit the current transaction, then dispatch recorded events.

        Handlers run synchronously on the caller's stack, so their effects
        are visible before commit() returns. Nothing is dispatched if the
        commit raises.
        """
        self._commit()
        for event in self.collect_events():
            for handler in self._handlers:
                handler(event)

    def rollback(self) -> None:
        """Rollback the current transaction and drop recorded events."""
        self._pending_events.clear()
        self._rollback()

    def __enter__(self) -> Self:
        """Enter the unit of work context."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """
        Exit the unit of work context.

        If an exception occurred, rollback. Otherwise, do nothing
        (commit must be called explicitly).
        """
        if exc_type is not None:
            self.rollback()

    def record_event(self, event: DomainEvent) -> None:
        """Queue a domain event for dispatch after commit."""
        self._pending_events.append(event)

    def collect_events(self) -> list[DomainEvent]:
        """Collect and clear all recorded domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events

    def register_event_handler(self, handler: EventHandler) -> None:
        """Register a handler to be called for every dispatched event."""
        self._handlers.append(handler)
