"""Protocol for the known-cards read-through cache."""

from collections.abc import Callable, Collection
from typing import Protocol

from flashdeck.domain.common.value_objects import CardId, DeckId

KnownCardsLoader = Callable[[], set[CardId]]
KnownCardsBatchLoader = Callable[[list[DeckId]], dict[DeckId, set[CardId]]]


class KnownCardsCacheProtocol(Protocol):
    """Read-through cache of known-card sets keyed by deck."""

    def get_known_cards(
        self, deck_id: DeckId, loader: KnownCardsLoader, *, force_reload: bool = False
    ) -> frozenset[CardId]:
        """Return the cached set, loading it on a miss or when forced."""
        ...

    def get_known_cards_batch(
        self, deck_ids: Collection[DeckId], batch_loader: KnownCardsBatchLoader
    ) -> dict[DeckId, frozenset[CardId]]:
        """Return sets for decks with known cards; misses are loaded in one call."""
        ...

    def invalidate(self, deck_id: DeckId) -> None:
        """Evict a deck. Evicting an absent deck is a no-op."""
        ...
