"""Protocol for the progress store."""

from collections.abc import Collection
from datetime import date
from typing import Protocol

from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.stats import DailyStatsRecord, DeckAggregate


class ProgressRepositoryProtocol(Protocol):
    """
    Protocol for known-card and daily-stats persistence.

    Implementations do not commit; the caller's unit of work does.
    """

    def mark_known(self, deck_id: DeckId, card_id: CardId) -> None:
        """Add a card to the deck's known set. Idempotent."""
        ...

    def mark_known_batch(self, deck_id: DeckId, card_ids: Collection[CardId]) -> None:
        """
        Add several cards to the deck's known set in one statement.

        Idempotent: cards already known are left untouched.
        """
        ...

    def unmark_known(self, deck_id: DeckId, card_id: CardId) -> None:
        """Remove a card from the deck's known set. Idempotent."""
        ...

    def is_card_known(self, deck_id: DeckId, card_id: CardId) -> bool:
        """Check one card directly in the store."""
        ...

    def get_known_card_ids(self, deck_id: DeckId) -> set[CardId]:
        """Get the deck's known-card set."""
        ...

    def get_known_card_ids_batch(
        self, deck_ids: Collection[DeckId]
    ) -> dict[DeckId, set[CardId]]:
        """
        Get known-card sets for several decks in one query.

        Decks without known cards are omitted from the result.
        """
        ...

    def reset_deck_progress(self, deck_id: DeckId) -> int:
        """
        Delete all known cards and daily stats of a deck.

        Returns:
            Number of known-card rows removed
        """
        ...

    def accumulate_daily_stats(
        self,
        deck_id: DeckId,
        stat_date: date,
        *,
        sessions_delta: int = 1,
        viewed_delta: int = 0,
        correct_delta: int = 0,
        repeat_delta: int = 0,
        hard_delta: int = 0,
        duration_delta_ms: int = 0,
        answer_delay_delta_ms: int = 0,
    ) -> None:
        """
        Add deltas to the (deck, date) record in one atomic statement.

        A missing record is created with the deltas as its initial content.
        """
        ...

    def get_daily_stats(self, deck_id: DeckId) -> list[DailyStatsRecord]:
        """Get the deck's daily records, ascending by date."""
        ...

    def get_aggregate_for_deck(self, deck_id: DeckId, today: date) -> DeckAggregate:
        """All-time and today rollups for a single deck."""
        ...

    def get_aggregates_for_decks(
        self, deck_ids: Collection[DeckId], today: date
    ) -> dict[DeckId, DeckAggregate]:
        """
        All-time and today rollups for several decks in one query.

        Every requested deck is present; inactive decks have all-zero rollups.
        """
        ...
