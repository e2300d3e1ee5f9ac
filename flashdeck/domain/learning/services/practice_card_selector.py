"""Domain service for choosing the cards of a practice session."""

import random
from collections.abc import Iterable, Sequence, Set

from flashdeck.domain.common.value_objects import CardId
from flashdeck.domain.learning.entities.card import Card


class PracticeCardSelector:
    """
    Stateless selection rules for practice sessions.

    The random source is injectable so tests can pin shuffles.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    @staticmethod
    def not_known(cards: Iterable[Card], known_card_ids: Set[CardId]) -> list[Card]:
        """Cards not in the known set, in their input order."""
        return [card for card in cards if card.id not in known_card_ids]

    @staticmethod
    def clamp_count(requested_count: int, available: int) -> int:
        """
        Clamp a requested session size to [1, available].

        Returns 0 only when nothing is available.
        """
        if available <= 0:
            return 0
        return min(max(requested_count, 1), available)

    @staticmethod
    def resolve_default_count(configured_default: int, available: int) -> int:
        """Configured default shrunk to what is available, never below 1."""
        return max(1, min(available, configured_default))

    def select(
        self,
        cards: Sequence[Card],
        known_card_ids: Set[CardId],
        requested_count: int,
        random_order: bool,
    ) -> list[Card]:
        """
        Build the ordered working set for one practice run.

        Args:
            cards: All cards of the deck in stable store order
            known_card_ids: Cards the learner already knows
            requested_count: Desired size, clamped to [1, not-known count]
            random_order: Shuffle uniformly before truncating

        Returns:
            Selected cards; empty when every card is known
        """
        candidates = self.not_known(cards, known_card_ids)
        count = self.clamp_count(requested_count, len(candidates))
        if count == 0:
            return []
        if random_order:
            return self._rng.sample(candidates, count)
        return candidates[:count]

    def select_failed(
        self,
        cards: Sequence[Card],
        known_card_ids: Set[CardId],
        failed_card_ids: Iterable[CardId],
    ) -> list[Card]:
        """
        Re-validate previously failed cards and shuffle them.

        Cards learned since the failure, or no longer in the deck, are dropped.
        """
        failed = set(failed_card_ids)
        if not failed:
            return []
        remaining = [
            card for card in self.not_known(cards, known_card_ids) if card.id in failed
        ]
        self._rng.shuffle(remaining)
        return remaining
