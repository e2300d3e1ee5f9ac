"""
Practice statistics value objects.

These are pure data structures with no I/O or external dependencies.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from flashdeck.domain.common.exceptions import ValidationError
from flashdeck.domain.common.value_object import ValueObject
from flashdeck.domain.common.value_objects import CardId, DeckId


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half away from zero for non-negative operands."""
    return (2 * numerator + denominator) // (2 * denominator)


@dataclass(frozen=True)
class SessionStats(ValueObject):
    """
    Effects of one practice session, as flushed to the progress store.

    Attributes:
        deck_id: Deck that was practiced.
        viewed: Cards labeled during the session.
        correct: Cards labeled "know".
        repeat: Cards labeled "repeat".
        hard: Cards labeled "hard".
        session_duration_ms: Wall-clock duration of the session.
        total_answer_delay_ms: Time spent on questions before revealing.
        known_card_ids_delta: Cards to add to the deck's known set.
    """

    deck_id: DeckId
    viewed: int
    correct: int = 0
    repeat: int = 0
    hard: int = 0
    session_duration_ms: int = 0
    total_answer_delay_ms: int = 0
    known_card_ids_delta: tuple[CardId, ...] = ()

    def __post_init__(self) -> None:
        for name in (
            "viewed",
            "correct",
            "repeat",
            "hard",
            "session_duration_ms",
            "total_answer_delay_ms",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValidationError(f"{name} cannot be negative", field=name, value=value)
        if self.correct + self.repeat + self.hard > self.viewed:
            raise ValidationError(
                "Outcome counts cannot exceed viewed count", field="viewed", value=self.viewed
            )
        object.__setattr__(self, "known_card_ids_delta", tuple(self.known_card_ids_delta))


@dataclass(frozen=True)
class DailyStatsRecord(ValueObject):
    """Additive per (deck, calendar date) aggregate of practice activity."""

    date: date
    sessions: int
    viewed: int
    correct: int
    repeat: int
    hard: int
    total_duration_ms: int
    total_answer_delay_ms: int


@dataclass(frozen=True)
class DeckAggregate(ValueObject):
    """All-time and today rollups for one deck."""

    sessions_all: int = 0
    viewed_all: int = 0
    correct_all: int = 0
    hard_all: int = 0
    sessions_today: int = 0
    viewed_today: int = 0
    correct_today: int = 0
    hard_today: int = 0


@dataclass(frozen=True)
class StatsTotals(ValueObject):
    """Sum of deck rollups for either the all-time or today columns."""

    sessions: int = 0
    viewed: int = 0
    correct: int = 0
    hard: int = 0

    @classmethod
    def from_aggregates(
        cls, aggregates: Iterable[DeckAggregate], *, overall: bool
    ) -> "StatsTotals":
        """
        Sum rollups across decks.

        Args:
            aggregates: Per-deck rollups
            overall: True to sum all-time columns, False for today's columns
        """
        sessions = viewed = correct = hard = 0
        for aggregate in aggregates:
            if overall:
                sessions += aggregate.sessions_all
                viewed += aggregate.viewed_all
                correct += aggregate.correct_all
                hard += aggregate.hard_all
            else:
                sessions += aggregate.sessions_today
                viewed += aggregate.viewed_today
                correct += aggregate.correct_today
                hard += aggregate.hard_today
        return cls(sessions=sessions, viewed=viewed, correct=correct, hard=hard)


@dataclass(frozen=True)
class CompletionSummary(ValueObject):
    """Display-ready result of ending a practice session."""

    deck_id: DeckId
    total_cards: int
    viewed: int
    correct: int
    hard: int
    repeat: int
    session_minutes: int
    avg_answer_seconds: int
    failed_card_ids: tuple[CardId, ...] = field(default=())

    @property
    def has_failed_cards(self) -> bool:
        """Whether a "practice again" sub-session can be offered."""
        return bool(self.failed_card_ids)
