"""Use case for reading and mutating a learner's progress."""

from collections.abc import Iterable
from datetime import date

import structlog

from flashdeck.application.common.clock import Clock, local_date, utc_now
from flashdeck.application.common.unit_of_work import UnitOfWork
from flashdeck.application.learning.protocols.deck_repository import DeckRepositoryProtocol
from flashdeck.application.learning.protocols.known_cards_cache import KnownCardsCacheProtocol
from flashdeck.application.learning.protocols.progress_repository import (
    ProgressRepositoryProtocol,
)
from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.events import ProgressChanged, ProgressChangeType
from flashdeck.domain.learning.stats import DailyStatsRecord, SessionStats, round_half_up
from flashdeck.exceptions import DeckNotFoundError, ProgressPersistenceError, StorageError

logger = structlog.get_logger(__name__)
audit_logger = structlog.get_logger("flashdeck.audit")


class ProgressUseCase:
    """
    Progress store operations with cache coherence.

    Every mutation runs in the unit of work and records a ProgressChanged
    event; the unit of work hands it to the known-cards cache right after
    commit, so reads issued after a mutation returns see the new state.
    """

    def __init__(
        self,
        progress_repository: ProgressRepositoryProtocol,
        deck_repository: DeckRepositoryProtocol,
        known_cards_cache: KnownCardsCacheProtocol,
        unit_of_work: UnitOfWork,
        clock: Clock = utc_now,
        stats_timezone: str = "UTC",
    ) -> None:
        """Initialize use case with repository protocols."""
        self.progress_repository = progress_repository
        self.deck_repository = deck_repository
        self.known_cards_cache = known_cards_cache
        self.unit_of_work = unit_of_work
        self.clock = clock
        self.stats_timezone = stats_timezone

    def today(self) -> date:
        """Calendar date that new daily stats are bucketed under."""
        return local_date(self.clock(), self.stats_timezone)

    # Known cards

    def mark_known(self, deck_id: int, card_id: int) -> None:
        """
        Add a card to the deck's known set. Idempotent.

        Raises:
            ProgressPersistenceError: If the write could not be committed
        """
        deck_id_vo = DeckId(deck_id)
        card_id_vo = CardId(card_id)

        try:
            with self.unit_of_work:
                self.progress_repository.mark_known(deck_id_vo, card_id_vo)
                self.unit_of_work.record_event(
                    ProgressChanged(deck_id=deck_id_vo, card_id=card_id_vo)
                )
                self.unit_of_work.commit()
        except StorageError as e:
            logger.error("mark_known_failed", deck_id=deck_id, card_id=card_id, error=str(e))
            raise ProgressPersistenceError(deck_id, "mark known") from e

        logger.info("card_marked_known", deck_id=deck_id, card_id=card_id)

    def unmark_known(self, deck_id: int, card_id: int) -> None:
        """
        Remove a card from the deck's known set. Idempotent.

        Raises:
            ProgressPersistenceError: If the write could not be committed
        """
        deck_id_vo = DeckId(deck_id)
        card_id_vo = CardId(card_id)

        try:
            with self.unit_of_work:
                self.progress_repository.unmark_known(deck_id_vo, card_id_vo)
                self.unit_of_work.record_event(
                    ProgressChanged(deck_id=deck_id_vo, card_id=card_id_vo)
                )
                self.unit_of_work.commit()
        except StorageError as e:
            logger.error("unmark_known_failed", deck_id=deck_id, card_id=card_id, error=str(e))
            raise ProgressPersistenceError(deck_id, "unmark known") from e

        logger.info("card_unmarked_known", deck_id=deck_id, card_id=card_id)

    def set_card_known(self, deck_id: int, card_id: int, known: bool) -> None:
        if known:
            self.mark_known(deck_id, card_id)
        else:
            self.unmark_known(deck_id, card_id)

    def toggle_card_known(self, deck_id: int, card_id: int) -> bool:
        """
        Flip a card's known status.

        Returns:
            True if the card is known afterwards
        """
        known = not self.is_card_known(deck_id, card_id)
        self.set_card_known(deck_id, card_id, known)
        return known

    def is_card_known(self, deck_id: int, card_id: int) -> bool:
        """Check one card against the store, bypassing the cache."""
        return self.progress_repository.is_card_known(DeckId(deck_id), CardId(card_id))

    def get_known_card_ids(self, deck_id: int, *, force_reload: bool = False) -> frozenset[CardId]:
        """
        Get the deck's known-card set through the cache.

        Args:
            deck_id: ID of the deck
            force_reload: Ignore the cached copy and refresh it from the store
        """
        deck_id_vo = DeckId(deck_id)
        return self.known_cards_cache.get_known_cards(
            deck_id_vo,
            lambda: self.progress_repository.get_known_card_ids(deck_id_vo),
            force_reload=force_reload,
        )

    def get_known_card_ids_batch(
        self, deck_ids: Iterable[int]
    ) -> dict[DeckId, frozenset[CardId]]:
        """
        Get known-card sets for several decks through the cache.

        Decks without known cards are absent from the result.
        """
        deck_id_vos = [DeckId(deck_id) for deck_id in deck_ids]
        return self.known_cards_cache.get_known_cards_batch(
            deck_id_vos, self.progress_repository.get_known_card_ids_batch
        )

    def get_deck_progress_percent(self, deck_id: int, deck_size: int) -> int:
        """Share of the deck's cards that are known, as a whole percentage in [0, 100]."""
        if deck_size <= 0:
            return 0
        known = len(self.get_known_card_ids(deck_id))
        return min(max(round_half_up(100 * known, deck_size), 0), 100)

    def reset_deck_progress(self, deck_id: int) -> int:
        """
        Forget all known cards and daily stats of a deck.

        Args:
            deck_id: ID of the deck

        Returns:
            Number of known cards that were removed

        Raises:
            DeckNotFoundError: If the deck does not exist
            ProgressPersistenceError: If the write could not be committed
        """
        deck_id_vo = DeckId(deck_id)
        deck = self.deck_repository.find_by_id(deck_id_vo)
        if deck is None:
            raise DeckNotFoundError(deck_id)

        try:
            with self.unit_of_work:
                removed = self.progress_repository.reset_deck_progress(deck_id_vo)
                self.unit_of_work.record_event(
                    ProgressChanged(deck_id=deck_id_vo, change_type=ProgressChangeType.DECK_RESET)
                )
                self.unit_of_work.commit()
        except StorageError as e:
            logger.error("deck_progress_reset_failed", deck_id=deck_id, error=str(e))
            raise ProgressPersistenceError(deck_id, "progress reset") from e

        logger.info("deck_progress_reset", deck_id=deck_id, known_cards_removed=removed)
        audit_logger.info(
            "deck_progress_reset",
            deck_id=deck_id,
            deck_title=deck.title,
            user_id=deck.user_id.value,
            known_cards_removed=removed,
        )
        return removed

    # Daily stats

    def get_daily_stats(self, deck_id: int) -> list[DailyStatsRecord]:
        return self.progress_repository.get_daily_stats(DeckId(deck_id))

    def record_session(self, stats: SessionStats) -> None:
        """
        Flush one session's effects in a single transaction.

        Adds the known-card delta to the known set and accumulates the
        counters into today's record for the deck. Either both land or
        neither does.

        Raises:
            ProgressPersistenceError: If the write could not be committed
        """
        stat_date = self.today()

        try:
            with self.unit_of_work:
                if stats.known_card_ids_delta:
                    self.progress_repository.mark_known_batch(
                        stats.deck_id, stats.known_card_ids_delta
                    )
                self.progress_repository.accumulate_daily_stats(
                    stats.deck_id,
                    stat_date,
                    sessions_delta=1,
                    viewed_delta=stats.viewed,
                    correct_delta=stats.correct,
                    repeat_delta=stats.repeat,
                    hard_delta=stats.hard,
                    duration_delta_ms=stats.session_duration_ms,
                    answer_delay_delta_ms=stats.total_answer_delay_ms,
                )
                self.unit_of_work.record_event(
                    ProgressChanged(
                        deck_id=stats.deck_id, change_type=ProgressChangeType.SESSION_RECORDED
                    )
                )
                self.unit_of_work.commit()
        except StorageError as e:
            logger.error(
                "practice_session_record_failed", deck_id=stats.deck_id.value, error=str(e)
            )
            raise ProgressPersistenceError(stats.deck_id.value, "session results") from e

        logger.info(
            "practice_session_recorded",
            deck_id=stats.deck_id.value,
            stat_date=stat_date.isoformat(),
            viewed=stats.viewed,
            correct=stats.correct,
            hard=stats.hard,
            repeat=stats.repeat,
            known_delta=len(stats.known_card_ids_delta),
        )
