"""Use case for ending a practice session and flushing its results."""

import structlog

from flashdeck.application.learning.use_cases.progress.progress_use_case import ProgressUseCase
from flashdeck.domain.learning.entities.practice_session import PracticeSession
from flashdeck.domain.learning.exceptions import SessionAlreadyRecordedError
from flashdeck.domain.learning.services.completion_metrics_calculator import (
    CompletionMetricsCalculator,
)
from flashdeck.domain.learning.stats import CompletionSummary

logger = structlog.get_logger(__name__)


class CompletePracticeSessionUseCase:
    """Completion recorder: persists a session's effects once and summarizes it."""

    def __init__(
        self,
        progress_use_case: ProgressUseCase,
        metrics_calculator: CompletionMetricsCalculator,
    ) -> None:
        self.progress_use_case = progress_use_case
        self.metrics_calculator = metrics_calculator

    def complete(self, session: PracticeSession) -> CompletionSummary:
        """
        Flush a session to the progress store and build its summary.

        May be called before every card was labeled; only labeled cards
        count. A session in which nothing was labeled writes nothing.

        Args:
            session: The in-memory practice session

        Returns:
            Display-ready completion summary

        Raises:
            SessionAlreadyRecordedError: If the session was completed before
            ProgressPersistenceError: If the store write failed; the session
                stays unrecorded and can be completed again
        """
        if session.recorded:
            raise SessionAlreadyRecordedError()

        duration_ms = session.elapsed_ms()
        summary = self.metrics_calculator.summary(session, duration_ms)

        if session.viewed == 0:
            session.mark_recorded()
            logger.info(
                "practice_session_completed_without_answers",
                deck_id=session.deck_id.value,
                session_id=str(session.session_id),
            )
            return summary

        stats = self.metrics_calculator.session_stats(session, duration_ms)
        self.progress_use_case.record_session(stats)
        session.mark_recorded()

        logger.info(
            "practice_session_completed",
            deck_id=session.deck_id.value,
            session_id=str(session.session_id),
            viewed=summary.viewed,
            correct=summary.correct,
            hard=summary.hard,
            repeat=summary.repeat,
            session_minutes=summary.session_minutes,
            failed=len(summary.failed_card_ids),
        )
        return summary
