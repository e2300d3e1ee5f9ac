"""Value objects for the practice domain."""

from dataclasses import dataclass
from enum import StrEnum

from flashdeck.domain.common.value_object import ValueObject


class PracticeOutcome(StrEnum):
    """Label a learner assigns to a card after seeing the answer."""

    KNOW = "know"
    HARD = "hard"
    REPEAT = "repeat"


class PracticeDirection(StrEnum):
    """Which side of the card is shown as the question."""

    FRONT_TO_BACK = "FRONT_TO_BACK"
    BACK_TO_FRONT = "BACK_TO_FRONT"


class PracticeState(StrEnum):
    """States of the practice session state machine."""

    QUESTION = "question"
    ANSWER = "answer"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SessionProgress(ValueObject):
    """
    Snapshot of a session's counters for display.

    Attributes:
        current: 1-based position of the card on screen, clamped to the card count.
        total: Number of cards in the session.
        viewed: Cards labeled so far.
        correct: Cards labeled "know".
        hard: Cards labeled "hard".
        repeat: Cards labeled "repeat".
        percent: round(viewed / total * 100), 0 for an empty session.
    """

    current: int
    total: int
    viewed: int
    correct: int
    hard: int
    repeat: int
    percent: int


@dataclass(frozen=True)
class PracticeSettings(ValueObject):
    """Defaults applied when a caller does not choose size, order or direction."""

    default_count: int = 10
    default_random_order: bool = True
    default_direction: PracticeDirection = PracticeDirection.FRONT_TO_BACK

    def __post_init__(self) -> None:
        # Non-positive configured sizes behave like 1
        if self.default_count < 1:
            object.__setattr__(self, "default_count", 1)
