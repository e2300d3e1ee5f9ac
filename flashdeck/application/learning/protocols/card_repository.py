"""Protocol for the read-only card store."""

from typing import Protocol

from flashdeck.domain.common.value_objects import DeckId
from flashdeck.domain.learning.card_filter import CardFilter
from flashdeck.domain.learning.entities.card import Card


class CardRepositoryProtocol(Protocol):
    """Protocol for reading a deck's cards."""

    def list_cards_for_deck(self, deck_id: DeckId) -> list[Card]:
        """
        Get all cards of a deck.

        Args:
            deck_id: The deck ID

        Returns:
            Card entities in stable store order (ascending ID)
        """
        ...

    def find_by_filter(
        self,
        deck_id: DeckId,
        card_filter: CardFilter,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Card]:
        """
        Search a deck's cards.

        Args:
            deck_id: The deck ID
            card_filter: Text and known-state predicates
            limit: Maximum number of cards, None for all
            offset: Number of matching cards to skip

        Returns:
            Matching card entities, newest first
        """
        ...

    def count_by_filter(self, deck_id: DeckId, card_filter: CardFilter) -> int:
        """Count a deck's cards matching the filter."""
        ...
