"""Protocol for read-only deck lookups."""

from typing import Protocol

from flashdeck.domain.common.value_objects import DeckId, UserId
from flashdeck.domain.learning.entities.deck import Deck


class DeckRepositoryProtocol(Protocol):
    """Protocol for Deck lookups used by the practice engine."""

    def find_by_id(self, deck_id: DeckId) -> Deck | None:
        """Find a deck by ID."""
        ...

    def find_by_user(self, user_id: UserId) -> list[Deck]:
        """Get all decks owned by a user, ordered by ID."""
        ...
