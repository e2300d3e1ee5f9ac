"""Mapper for DeckDailyStats ORM ↔ Domain conversion."""

from flashdeck.domain.learning.stats import DailyStatsRecord
from flashdeck.models import DeckDailyStats as DeckDailyStatsORM


class DailyStatsMapper:
    def to_domain(self, orm_model: DeckDailyStatsORM) -> DailyStatsRecord:
        """Convert ORM model to domain value object."""
        return DailyStatsRecord(
            date=orm_model.stat_date,
            sessions=orm_model.sessions,
            viewed=orm_model.viewed,
            correct=orm_model.correct,
            repeat=orm_model.repeat,
            hard=orm_model.hard,
            total_duration_ms=orm_model.total_duration_ms,
            total_answer_delay_ms=orm_model.total_delay_ms,
        )
