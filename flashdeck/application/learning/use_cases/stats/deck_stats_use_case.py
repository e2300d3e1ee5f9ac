"""Use case for per-deck and multi-deck practice rollups."""

from collections.abc import Iterable
from datetime import date

import structlog

from flashdeck.application.common.clock import Clock, local_date, utc_now
from flashdeck.application.learning.protocols.deck_repository import DeckRepositoryProtocol
from flashdeck.application.learning.protocols.progress_repository import (
    ProgressRepositoryProtocol,
)
from flashdeck.domain.common.value_objects import DeckId, UserId
from flashdeck.domain.learning.stats import DeckAggregate, StatsTotals

logger = structlog.get_logger(__name__)


class DeckStatsUseCase:
    """
    Batch aggregate resolver.

    Rollups for many decks come from one grouped query and are always
    equal to asking for each deck on its own.
    """

    def __init__(
        self,
        progress_repository: ProgressRepositoryProtocol,
        deck_repository: DeckRepositoryProtocol,
        clock: Clock = utc_now,
        stats_timezone: str = "UTC",
    ) -> None:
        self.progress_repository = progress_repository
        self.deck_repository = deck_repository
        self.clock = clock
        self.stats_timezone = stats_timezone

    def today(self) -> date:
        return local_date(self.clock(), self.stats_timezone)

    def get_deck_aggregate(self, deck_id: int, today: date | None = None) -> DeckAggregate:
        """All-time and today rollups for one deck; zeros for an inactive deck."""
        return self.progress_repository.get_aggregate_for_deck(
            DeckId(deck_id), today or self.today()
        )

    def get_deck_aggregates(
        self, deck_ids: Iterable[int], today: date | None = None
    ) -> dict[DeckId, DeckAggregate]:
        """
        All-time and today rollups for several decks in one round trip.

        Args:
            deck_ids: IDs of the decks
            today: Date counted as "today"; derived from the clock when omitted

        Returns:
            Rollup for every requested deck, all zeros for inactive decks
        """
        deck_id_vos = list(dict.fromkeys(DeckId(deck_id) for deck_id in deck_ids))
        aggregates = self.progress_repository.get_aggregates_for_decks(
            deck_id_vos, today or self.today()
        )
        logger.debug("deck_aggregates_resolved", deck_count=len(deck_id_vos))
        return aggregates

    def get_aggregates_for_user(
        self, user_id: int, today: date | None = None
    ) -> dict[DeckId, DeckAggregate]:
        """Rollups for every deck the user owns."""
        decks = self.deck_repository.find_by_user(UserId(user_id))
        return self.get_deck_aggregates([deck.id.value for deck in decks], today)

    def get_totals(
        self, deck_ids: Iterable[int], *, overall: bool, today: date | None = None
    ) -> StatsTotals:
        """
        Sum rollups across decks.

        Args:
            deck_ids: IDs of the decks
            overall: True for all-time totals, False for today's
            today: Date counted as "today"; derived from the clock when omitted
        """
        aggregates = self.get_deck_aggregates(deck_ids, today)
        return StatsTotals.from_aggregates(aggregates.values(), overall=overall)
