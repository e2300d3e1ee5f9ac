"""Use case for searching a deck's cards by text and known state."""

from flashdeck.application.learning.protocols.card_repository import CardRepositoryProtocol
from flashdeck.domain.common.value_objects import DeckId
from flashdeck.domain.learning.card_filter import CardFilter, KnownState
from flashdeck.domain.learning.entities.card import Card
from flashdeck.exceptions import InvalidRequestError


class SearchCardsUseCase:
    def __init__(self, card_repository: CardRepositoryProtocol) -> None:
        self.card_repository = card_repository

    def search(
        self,
        deck_id: int,
        search_text: str | None = None,
        known_state: KnownState | str = KnownState.ALL,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Card]:
        """
        Search a deck's cards, newest first.

        Args:
            deck_id: ID of the deck
            search_text: Case-insensitive substring of front, back or example
            known_state: Restrict to known or not-known cards
            limit: Page size, None for everything
            offset: Number of matches to skip

        Raises:
            InvalidRequestError: If paging arguments are negative
        """
        if limit is not None and limit < 0:
            raise InvalidRequestError("limit cannot be negative")
        if offset < 0:
            raise InvalidRequestError("offset cannot be negative")

        card_filter = CardFilter(search_text=search_text, known_state=KnownState(known_state))
        return self.card_repository.find_by_filter(DeckId(deck_id), card_filter, limit, offset)

    def count(
        self,
        deck_id: int,
        search_text: str | None = None,
        known_state: KnownState | str = KnownState.ALL,
    ) -> int:
        card_filter = CardFilter(search_text=search_text, known_state=KnownState(known_state))
        return self.card_repository.count_by_filter(DeckId(deck_id), card_filter)
