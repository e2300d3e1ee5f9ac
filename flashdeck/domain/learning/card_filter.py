"""
Composable card search filter.

A filter is a conjunction of optional predicates (text match, known
state). Storage adapters translate it into their native query form;
``matches`` is the in-memory form and must agree with them.
"""

from collections.abc import Set
from dataclasses import dataclass
from enum import StrEnum

from flashdeck.domain.common.value_object import ValueObject
from flashdeck.domain.common.value_objects import CardId
from flashdeck.domain.learning.entities.card import Card


class KnownState(StrEnum):
    ALL = "all"
    KNOWN_ONLY = "known_only"
    UNKNOWN_ONLY = "unknown_only"


@dataclass(frozen=True)
class CardFilter(ValueObject):
    """Search text and known-state predicates combined with AND."""

    search_text: str | None = None
    known_state: KnownState = KnownState.ALL

    def __post_init__(self) -> None:
        normalized = self.search_text.strip() if self.search_text else ""
        object.__setattr__(self, "search_text", normalized or None)
        object.__setattr__(self, "known_state", KnownState(self.known_state))

    @property
    def has_text_predicate(self) -> bool:
        return self.search_text is not None

    def matches(self, card: Card, known_card_ids: Set[CardId]) -> bool:
        """Evaluate the filter against one card."""
        if self.search_text is not None:
            needle = self.search_text.casefold()
            haystacks = (card.front_text, card.back_text, card.example or "")
            if not any(needle in text.casefold() for text in haystacks):
                return False

        if self.known_state is KnownState.KNOWN_ONLY:
            return card.id in known_card_ids
        if self.known_state is KnownState.UNKNOWN_ONLY:
            return card.id not in known_card_ids
        return True
