"""
PracticeSession aggregate: the question/answer/label state machine.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from flashdeck.domain.common.exceptions import InvariantViolationError
from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.entities.card import Card
from flashdeck.domain.learning.exceptions import (
    IllegalSessionTransitionError,
    SessionAlreadyCompleteError,
    SessionAlreadyRecordedError,
)
from flashdeck.domain.learning.stats import round_half_up
from flashdeck.domain.learning.value_objects import (
    PracticeDirection,
    PracticeOutcome,
    PracticeState,
    SessionProgress,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False)
class PracticeSession:
    """
    One learner's run through an ordered set of cards.

    The card order is fixed at creation. Each card goes through
    QUESTION -> ANSWER -> labeled, and labeling the last card moves the
    session to COMPLETE. The session lives only in memory; only the
    effects flushed by the completion recorder are persisted.

    Business Rules:
    - 0 <= index <= len(cards); index == len(cards) is the COMPLETE state
    - reveal() only from QUESTION, label() only from ANSWER
    - Every label increments viewed and exactly one outcome counter
    - Results can be recorded at most once
    """

    deck_id: DeckId
    cards: tuple[Card, ...]
    direction: PracticeDirection = PracticeDirection.FRONT_TO_BACK
    clock: Callable[[], datetime] = field(default=_utc_now, repr=False)

    session_id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(init=False)
    index: int = field(default=0, init=False)
    answer_revealed: bool = field(default=False, init=False)
    viewed: int = field(default=0, init=False)
    correct: int = field(default=0, init=False)
    hard: int = field(default=0, init=False)
    repeat: int = field(default=0, init=False)
    total_answer_delay_ms: int = field(default=0, init=False)
    question_shown_at: datetime | None = field(default=None, init=False, repr=False)
    recorded: bool = field(default=False, init=False)

    _known_card_ids_delta: list[CardId] = field(default_factory=list, init=False, repr=False)
    _failed_card_ids: list[CardId] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate invariants and start the first question."""
        self.cards = tuple(self.cards)
        seen: set[CardId] = set()
        for card in self.cards:
            if card.deck_id != self.deck_id:
                raise InvariantViolationError(
                    "PracticeSession", f"card {card.id} does not belong to deck {self.deck_id}"
                )
            if card.id in seen:
                raise InvariantViolationError("PracticeSession", f"card {card.id} appears twice")
            seen.add(card.id)

        self.started_at = self.clock()
        if self.cards:
            self.question_shown_at = self.started_at

    @classmethod
    def start(
        cls,
        deck_id: DeckId,
        cards: Sequence[Card],
        direction: PracticeDirection = PracticeDirection.FRONT_TO_BACK,
        clock: Callable[[], datetime] = _utc_now,
    ) -> "PracticeSession":
        """
        Create a session positioned on the first question.

        An empty card list yields a session that is already COMPLETE.
        """
        return cls(deck_id=deck_id, cards=tuple(cards), direction=direction, clock=clock)

    @property
    def total_cards(self) -> int:
        return len(self.cards)

    @property
    def state(self) -> PracticeState:
        """Current state of the state machine."""
        if self.index >= len(self.cards):
            return PracticeState.COMPLETE
        if self.answer_revealed:
            return PracticeState.ANSWER
        return PracticeState.QUESTION

    @property
    def is_complete(self) -> bool:
        return self.state is PracticeState.COMPLETE

    @property
    def current_card(self) -> Card | None:
        """Card on screen, or None once the session is complete."""
        if self.is_complete:
            return None
        return self.cards[self.index]

    @property
    def prompt_text(self) -> str | None:
        """Side of the current card shown as the question."""
        card = self.current_card
        if card is None:
            return None
        if self.direction is PracticeDirection.BACK_TO_FRONT:
            return card.back_text
        return card.front_text

    @property
    def answer_text(self) -> str | None:
        """Side of the current card shown after reveal."""
        card = self.current_card
        if card is None:
            return None
        if self.direction is PracticeDirection.BACK_TO_FRONT:
            return card.front_text
        return card.back_text

    @property
    def known_card_ids_delta(self) -> list[CardId]:
        """Cards labeled "know" during this run, in labeling order."""
        return list(self._known_card_ids_delta)

    @property
    def failed_card_ids(self) -> list[CardId]:
        """Cards labeled "hard" or "repeat" during this run, in labeling order."""
        return list(self._failed_card_ids)

    def reveal(self) -> int:
        """
        Show the answer of the current card.

        Returns:
            Milliseconds the learner spent on the question.

        Raises:
            SessionAlreadyCompleteError: If the session is complete
            IllegalSessionTransitionError: If the answer is already shown
        """
        state = self.state
        if state is PracticeState.COMPLETE:
            raise SessionAlreadyCompleteError("reveal")
        if state is not PracticeState.QUESTION:
            raise IllegalSessionTransitionError("reveal", state.value)

        delay_ms = 0
        if self.question_shown_at is not None:
            elapsed = self.clock() - self.question_shown_at
            # Clock adjustments must never produce a negative delay
            delay_ms = max(0, int(elapsed.total_seconds() * 1000))

        self.total_answer_delay_ms += delay_ms
        self.answer_revealed = True
        return delay_ms

    def label(self, outcome: PracticeOutcome | str) -> PracticeState:
        """
        Label the current card and advance.

        Args:
            outcome: know, hard or repeat

        Returns:
            The state after the transition

        Raises:
            SessionAlreadyCompleteError: If the session is complete
            IllegalSessionTransitionError: If the answer has not been revealed
            ValueError: If outcome is not a known label
        """
        state = self.state
        if state is PracticeState.COMPLETE:
            raise SessionAlreadyCompleteError("label")
        if state is not PracticeState.ANSWER:
            raise IllegalSessionTransitionError("label", state.value)

        outcome = PracticeOutcome(outcome)
        card = self.cards[self.index]

        self.viewed += 1
        if outcome is PracticeOutcome.KNOW:
            self.correct += 1
            self._known_card_ids_delta.append(card.id)
        elif outcome is PracticeOutcome.HARD:
            self.hard += 1
            self._failed_card_ids.append(card.id)
        else:
            self.repeat += 1
            self._failed_card_ids.append(card.id)

        self.index += 1
        self.answer_revealed = False
        self.question_shown_at = None if self.is_complete else self.clock()
        return self.state

    def progress(self) -> SessionProgress:
        """Pure projection of the counters."""
        total = len(self.cards)
        current = min(max(self.index + 1, 1), total) if total else 0
        percent = round_half_up(self.viewed * 100, total) if total else 0
        return SessionProgress(
            current=current,
            total=total,
            viewed=self.viewed,
            correct=self.correct,
            hard=self.hard,
            repeat=self.repeat,
            percent=percent,
        )

    def elapsed_ms(self) -> int:
        """Wall-clock milliseconds since the session started, never negative."""
        elapsed = self.clock() - self.started_at
        return max(0, int(elapsed.total_seconds() * 1000))

    def mark_recorded(self) -> None:
        """
        Flag the session as flushed to the progress store.

        Raises:
            SessionAlreadyRecordedError: If it was flushed before
        """
        if self.recorded:
            raise SessionAlreadyRecordedError()
        self.recorded = True
