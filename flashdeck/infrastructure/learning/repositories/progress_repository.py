"""
Repository for learner progress: known cards and daily practice stats.

Every mutation is a single statement so concurrent writers cannot lose
updates. Nothing here commits; the unit of work does.
"""

import logging
from collections.abc import Collection
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import case, delete, exists, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.stats import DailyStatsRecord, DeckAggregate
from flashdeck.exceptions import ServiceError
from flashdeck.infrastructure.learning.mappers.daily_stats_mapper import DailyStatsMapper
from flashdeck.models import DeckDailyStats as DeckDailyStatsORM
from flashdeck.models import KnownCard as KnownCardORM

logger = logging.getLogger(__name__)

_daily_stats_table = DeckDailyStatsORM.__table__
_known_cards_table = KnownCardORM.__table__


class ProgressRepository:
    """Repository for known-card and daily-stats persistence."""

    def __init__(self, db: Session) -> None:
        """
        Initialize repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db
        self.mapper = DailyStatsMapper()

    # Known cards

    def mark_known(self, deck_id: DeckId, card_id: CardId) -> None:
        self.mark_known_batch(deck_id, [card_id])

    def mark_known_batch(self, deck_id: DeckId, card_ids: Collection[CardId]) -> None:
        """
        Add cards to the deck's known set.

        Uses ON CONFLICT DO NOTHING on (deck_id, card_id), so marking a
        card that is already known is a no-op.
        """
        unique_ids = sorted({card_id.value for card_id in card_ids})
        if not unique_ids:
            return

        created_at = datetime.now(UTC)
        values = [
            {"deck_id": deck_id.value, "card_id": card_id, "created_at": created_at}
            for card_id in unique_ids
        ]
        stmt = (
            self._insert(_known_cards_table)
            .values(values)
            .on_conflict_do_nothing(index_elements=["deck_id", "card_id"])
        )
        self.db.execute(stmt)
        logger.debug("Marked %d cards known in deck %s", len(unique_ids), deck_id.value)

    def unmark_known(self, deck_id: DeckId, card_id: CardId) -> None:
        stmt = delete(KnownCardORM).where(
            KnownCardORM.deck_id == deck_id.value,
            KnownCardORM.card_id == card_id.value,
        )
        self.db.execute(stmt)

    def is_card_known(self, deck_id: DeckId, card_id: CardId) -> bool:
        stmt = select(
            exists().where(
                KnownCardORM.deck_id == deck_id.value,
                KnownCardORM.card_id == card_id.value,
            )
        )
        return bool(self.db.execute(stmt).scalar())

    def get_known_card_ids(self, deck_id: DeckId) -> set[CardId]:
        stmt = select(KnownCardORM.card_id).where(KnownCardORM.deck_id == deck_id.value)
        return {CardId(card_id) for card_id in self.db.execute(stmt).scalars()}

    def get_known_card_ids_batch(
        self, deck_ids: Collection[DeckId]
    ) -> dict[DeckId, set[CardId]]:
        """
        Get known-card sets for several decks in one query.

        Decks without known cards are omitted from the result.
        """
        raw_ids = {deck_id.value for deck_id in deck_ids}
        if not raw_ids:
            return {}

        stmt = select(KnownCardORM.deck_id, KnownCardORM.card_id).where(
            KnownCardORM.deck_id.in_(sorted(raw_ids))
        )
        result: dict[DeckId, set[CardId]] = {}
        for deck_id, card_id in self.db.execute(stmt):
            result.setdefault(DeckId(deck_id), set()).add(CardId(card_id))
        return result

    def reset_deck_progress(self, deck_id: DeckId) -> int:
        """
        Delete all known cards and daily stats of a deck.

        Returns:
            Number of known-card rows removed
        """
        known_result = self.db.execute(
            delete(KnownCardORM).where(KnownCardORM.deck_id == deck_id.value)
        )
        stats_result = self.db.execute(
            delete(DeckDailyStatsORM).where(DeckDailyStatsORM.deck_id == deck_id.value)
        )
        removed: int = getattr(known_result, "rowcount", 0) or 0
        logger.debug(
            "Reset deck %s: %d known cards, %d daily stats rows",
            deck_id.value,
            removed,
            getattr(stats_result, "rowcount", 0) or 0,
        )
        return removed

    # Daily stats

    def accumulate_daily_stats(
        self,
        deck_id: DeckId,
        stat_date: date,
        *,
        sessions_delta: int = 1,
        viewed_delta: int = 0,
        correct_delta: int = 0,
        repeat_delta: int = 0,
        hard_delta: int = 0,
        duration_delta_ms: int = 0,
        answer_delay_delta_ms: int = 0,
    ) -> None:
        """
        Add deltas to the (deck, date) record in one atomic upsert.

        The conflict branch adds the incoming values to the stored ones, so
        two concurrent accumulations both land.
        """
        stmt = self._insert(_daily_stats_table).values(
            deck_id=deck_id.value,
            date=stat_date,
            sessions=sessions_delta,
            viewed=viewed_delta,
            correct=correct_delta,
            repeat=repeat_delta,
            hard=hard_delta,
            total_duration_ms=duration_delta_ms,
            total_delay_ms=answer_delay_delta_ms,
        )
        columns = _daily_stats_table.c
        additive = (
            "sessions",
            "viewed",
            "correct",
            "repeat",
            "hard",
            "total_duration_ms",
            "total_delay_ms",
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["deck_id", "date"],
            set_={name: columns[name] + stmt.excluded[name] for name in additive},
        )
        self.db.execute(stmt)

    def get_daily_stats(self, deck_id: DeckId) -> list[DailyStatsRecord]:
        stmt = (
            select(DeckDailyStatsORM)
            .where(DeckDailyStatsORM.deck_id == deck_id.value)
            .order_by(DeckDailyStatsORM.stat_date.asc())
        )
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def get_aggregate_for_deck(self, deck_id: DeckId, today: date) -> DeckAggregate:
        """All-time and today rollups for one deck, zero when it was never practiced."""
        columns = (
            DeckDailyStatsORM.sessions,
            DeckDailyStatsORM.viewed,
            DeckDailyStatsORM.correct,
            DeckDailyStatsORM.hard,
        )
        is_today = DeckDailyStatsORM.stat_date == today
        stmt = select(
            *(func.coalesce(func.sum(column), 0) for column in columns),
            *(func.coalesce(func.sum(column).filter(is_today), 0) for column in columns),
        ).where(DeckDailyStatsORM.deck_id == deck_id.value)

        row = self.db.execute(stmt).one()
        return DeckAggregate(
            sessions_all=int(row[0]),
            viewed_all=int(row[1]),
            correct_all=int(row[2]),
            hard_all=int(row[3]),
            sessions_today=int(row[4]),
            viewed_today=int(row[5]),
            correct_today=int(row[6]),
            hard_today=int(row[7]),
        )

    def get_aggregates_for_decks(
        self, deck_ids: Collection[DeckId], today: date
    ) -> dict[DeckId, DeckAggregate]:
        """
        All-time and today rollups for several decks in one grouped query.

        Every requested deck is present; inactive decks have all-zero rollups.
        """
        requested = {deck_id.value: deck_id for deck_id in deck_ids}
        result = {deck_id: DeckAggregate() for deck_id in requested.values()}
        if not requested:
            return result

        is_today = DeckDailyStatsORM.stat_date == today

        def total(column: Any) -> Any:
            return func.coalesce(func.sum(column), 0)

        def today_only(column: Any) -> Any:
            return func.coalesce(func.sum(case((is_today, column), else_=0)), 0)

        stmt = (
            select(
                DeckDailyStatsORM.deck_id,
                total(DeckDailyStatsORM.sessions),
                total(DeckDailyStatsORM.viewed),
                total(DeckDailyStatsORM.correct),
                total(DeckDailyStatsORM.hard),
                today_only(DeckDailyStatsORM.sessions),
                today_only(DeckDailyStatsORM.viewed),
                today_only(DeckDailyStatsORM.correct),
                today_only(DeckDailyStatsORM.hard),
            )
            .where(DeckDailyStatsORM.deck_id.in_(list(requested)))
            .group_by(DeckDailyStatsORM.deck_id)
        )

        for row in self.db.execute(stmt):
            result[requested[row[0]]] = DeckAggregate(
                sessions_all=int(row[1]),
                viewed_all=int(row[2]),
                correct_all=int(row[3]),
                hard_all=int(row[4]),
                sessions_today=int(row[5]),
                viewed_today=int(row[6]),
                correct_today=int(row[7]),
                hard_today=int(row[8]),
            )
        return result

    def _insert(self, table: Any) -> Any:
        """Dialect-specific INSERT supporting ON CONFLICT clauses."""
        if self.db.bind is None:
            raise ServiceError("Database not bound!")

        dialect = self.db.bind.dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        raise ServiceError(f"Unsupported database dialect for upserts: {dialect}")
