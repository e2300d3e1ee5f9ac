"""Custom exception hierarchy for the flashdeck application."""


class FlashdeckError(Exception):
    """Base exception for all flashdeck errors."""

    def __init__(self, message: str) -> None:
        """Initialize exception with message."""
        self.message = message
        super().__init__(self.message)


class NotFoundError(FlashdeckError):
    """Resource not found error."""


class DeckNotFoundError(NotFoundError):
    """Deck not found error."""

    def __init__(self, deck_id: int | None = None, *, message: str | None = None) -> None:
        """Initialize with deck ID or custom message."""
        self.deck_id = deck_id
        if message:
            super().__init__(message)
        elif deck_id is not None:
            super().__init__(f"Deck with id {deck_id} not found")
        else:
            super().__init__("Deck not found")


class InvalidRequestError(FlashdeckError):
    """A caller passed arguments the operation cannot serve."""


class ServiceError(FlashdeckError):
    """Service layer error."""


class ProgressPersistenceError(ServiceError):
    """A progress write could not be committed; none of it was applied."""

    def __init__(self, deck_id: int, operation: str) -> None:
        """Initialize with the deck and the operation that failed."""
        self.deck_id = deck_id
        self.operation = operation
        super().__init__(f"Failed to persist {operation} for deck {deck_id}")


class StorageError(ServiceError):
    """The database rejected a statement or a commit."""
