"""Fixtures for learning domain tests."""

from collections.abc import Callable

import pytest

from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.entities.card import Card

CardFactory = Callable[..., Card]


def _make_card(
    card_id: int,
    deck_id: int = 1,
    front: str | None = None,
    back: str | None = None,
    example: str | None = None,
) -> Card:
    return Card(
        id=CardId(card_id),
        deck_id=DeckId(deck_id),
        front_text=front or f"front {card_id}",
        back_text=back or f"back {card_id}",
        example=example,
    )


@pytest.fixture
def make_card() -> CardFactory:
    return _make_card


@pytest.fixture
def five_cards() -> list[Card]:
    """Cards 1 to 5 of deck 1, in store order."""
    return [_make_card(card_id) for card_id in range(1, 6)]
