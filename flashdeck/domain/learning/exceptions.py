"""Exceptions raised by the practice session state machine."""

from flashdeck.domain.common.exceptions import BusinessRuleViolationError, DomainError


class IllegalSessionTransitionError(DomainError):
    """Raised when reveal/label is called in a state that does not permit it."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(
            f"Cannot {action} while session is in state '{state}'",
            {"action": action, "state": state},
        )
        self.action = action
        self.state = state


class SessionAlreadyCompleteError(IllegalSessionTransitionError):
    """Raised when reveal/label is called on a completed session."""

    def __init__(self, action: str) -> None:
        super().__init__(action, "complete")


class SessionAlreadyRecordedError(BusinessRuleViolationError):
    """Raised when a session's results are flushed a second time."""

    def __init__(self) -> None:
        super().__init__(
            "session_recorded_once",
            "Practice session results have already been recorded",
        )
