"""Domain events raised when a learner's progress changes."""

from dataclasses import dataclass
from enum import StrEnum

from flashdeck.domain.common.domain_event import DomainEvent
from flashdeck.domain.common.value_objects import CardId, DeckId


class ProgressChangeType(StrEnum):
    CARD_STATUS_CHANGED = "card_status_changed"
    SESSION_RECORDED = "session_recorded"
    DECK_RESET = "deck_reset"


@dataclass(frozen=True)
class ProgressChanged(DomainEvent):
    """
    The known-card set or daily stats of a deck were mutated.

    Carries only the deck (and optionally the card); consumers evict
    rather than patch their copies.
    """

    deck_id: DeckId
    change_type: ProgressChangeType = ProgressChangeType.CARD_STATUS_CHANGED
    card_id: CardId | None = None
