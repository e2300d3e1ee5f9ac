"""Domain service turning a finished session into stats and a summary."""

from flashdeck.domain.learning.entities.practice_session import PracticeSession
from flashdeck.domain.learning.stats import CompletionSummary, SessionStats, round_half_up

MS_PER_SECOND = 1000
SECONDS_PER_MINUTE = 60


class CompletionMetricsCalculator:
    """Stateless derivations used by the completion recorder."""

    @staticmethod
    def session_stats(session: PracticeSession, duration_ms: int) -> SessionStats:
        """Counters and known-card delta to flush for the session."""
        return SessionStats(
            deck_id=session.deck_id,
            viewed=session.viewed,
            correct=session.correct,
            repeat=session.repeat,
            hard=session.hard,
            session_duration_ms=duration_ms,
            total_answer_delay_ms=session.total_answer_delay_ms,
            known_card_ids_delta=tuple(session.known_card_ids_delta),
        )

    @staticmethod
    def summary(session: PracticeSession, duration_ms: int) -> CompletionSummary:
        """
        Display summary for a session.

        Minutes and average answer seconds are clamped to at least 1 so
        downstream averages never divide by zero.
        """
        session_minutes = max(duration_ms // (MS_PER_SECOND * SECONDS_PER_MINUTE), 1)
        denominator = max(session.viewed, 1) * MS_PER_SECOND
        avg_answer_seconds = max(round_half_up(session.total_answer_delay_ms, denominator), 1)
        return CompletionSummary(
            deck_id=session.deck_id,
            total_cards=session.total_cards,
            viewed=session.viewed,
            correct=session.correct,
            hard=session.hard,
            repeat=session.repeat,
            session_minutes=session_minutes,
            avg_answer_seconds=avg_answer_seconds,
            failed_card_ids=tuple(session.failed_card_ids),
        )
