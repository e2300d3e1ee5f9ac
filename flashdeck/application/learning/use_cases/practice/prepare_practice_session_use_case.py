"""Use case for choosing cards and starting practice sessions."""

from collections.abc import Iterable

import structlog

from flashdeck.application.common.clock import Clock, utc_now
from flashdeck.application.learning.protocols.card_repository import CardRepositoryProtocol
from flashdeck.application.learning.use_cases.progress.progress_use_case import ProgressUseCase
from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.entities.card import Card
from flashdeck.domain.learning.entities.practice_session import PracticeSession
from flashdeck.domain.learning.services.practice_card_selector import PracticeCardSelector
from flashdeck.domain.learning.value_objects import PracticeDirection, PracticeSettings

logger = structlog.get_logger(__name__)


class PreparePracticeSessionUseCase:
    """
    Builds the working set of a practice run.

    Known cards are read through the cache, so a card marked known a
    moment ago is already excluded.
    """

    def __init__(
        self,
        card_repository: CardRepositoryProtocol,
        progress_use_case: ProgressUseCase,
        practice_settings: PracticeSettings,
        card_selector: PracticeCardSelector,
        clock: Clock = utc_now,
    ) -> None:
        self.card_repository = card_repository
        self.progress_use_case = progress_use_case
        self.practice_settings = practice_settings
        self.card_selector = card_selector
        self.clock = clock

    def get_not_known_cards(self, deck_id: int) -> list[Card]:
        """All cards of the deck not yet known, in store order."""
        cards = self.card_repository.list_cards_for_deck(DeckId(deck_id))
        known = self.progress_use_case.get_known_card_ids(deck_id)
        return self.card_selector.not_known(cards, known)

    def resolve_default_count(self, deck_id: int) -> int:
        """
        Session size to offer when the learner has not picked one.

        The configured default, shrunk to the number of not-known cards
        but never below 1.
        """
        available = len(self.get_not_known_cards(deck_id))
        return self.card_selector.resolve_default_count(
            self.practice_settings.default_count, available
        )

    def prepare_session(
        self,
        deck_id: int,
        requested_count: int | None = None,
        random_order: bool | None = None,
    ) -> list[Card]:
        """
        Choose the cards of a practice run.

        Args:
            deck_id: ID of the deck
            requested_count: Desired size, clamped to [1, not-known count];
                the configured default when omitted
            random_order: Shuffle before truncating; the configured default when omitted

        Returns:
            Ordered cards; empty when every card of the deck is known
        """
        deck_id_vo = DeckId(deck_id)
        if requested_count is None:
            requested_count = self.practice_settings.default_count
        if random_order is None:
            random_order = self.practice_settings.default_random_order

        cards = self.card_repository.list_cards_for_deck(deck_id_vo)
        known = self.progress_use_case.get_known_card_ids(deck_id)
        selected = self.card_selector.select(cards, known, requested_count, random_order)

        logger.info(
            "practice_session_prepared",
            deck_id=deck_id,
            deck_size=len(cards),
            known=len(known),
            requested_count=requested_count,
            selected=len(selected),
            random_order=random_order,
        )
        return selected

    def start_session(
        self,
        deck_id: int,
        requested_count: int | None = None,
        random_order: bool | None = None,
        direction: PracticeDirection | None = None,
    ) -> PracticeSession:
        """
        Prepare cards and open a session on the first question.

        When nothing is left to practice the returned session is already
        complete.
        """
        cards = self.prepare_session(deck_id, requested_count, random_order)
        return PracticeSession.start(
            DeckId(deck_id),
            cards,
            direction=direction or self.practice_settings.default_direction,
            clock=self.clock,
        )

    def prepare_repeat_session(
        self, deck_id: int, failed_card_ids: Iterable[int | CardId]
    ) -> list[Card]:
        """
        Cards for a "practice again" run over previously failed cards.

        Failed cards that were marked known since, or left the deck, are
        dropped. The rest are shuffled.
        """
        failed = [
            card_id if isinstance(card_id, CardId) else CardId(card_id)
            for card_id in failed_card_ids
        ]
        cards = self.card_repository.list_cards_for_deck(DeckId(deck_id))
        known = self.progress_use_case.get_known_card_ids(deck_id)
        selected = self.card_selector.select_failed(cards, known, failed)

        logger.info(
            "repeat_session_prepared",
            deck_id=deck_id,
            failed=len(failed),
            selected=len(selected),
        )
        return selected

    def start_repeat_session(self, previous: PracticeSession) -> PracticeSession:
        """Open a session over the cards failed in a previous run, in its direction."""
        deck_id = previous.deck_id.value
        cards = self.prepare_repeat_session(deck_id, previous.failed_card_ids)
        return PracticeSession.start(
            previous.deck_id, cards, direction=previous.direction, clock=self.clock
        )
