"""Tests for the dependency injection wiring."""

from collections.abc import Generator

import pytest
from dependency_injector import providers
from sqlalchemy.orm import Session

from flashdeck.config import Settings
from flashdeck.core import Container
from flashdeck.domain.common.value_objects import CardId
from flashdeck.domain.learning.value_objects import PracticeDirection


@pytest.fixture
def wired_container(db_session: Session) -> Generator[Container, None, None]:
    container = Container()
    container.db.override(db_session)
    container.settings.override(
        providers.Object(
            Settings(
                DATABASE_URL="sqlite:///:memory:",
                PRACTICE_DEFAULT_COUNT=2,
                PRACTICE_DEFAULT_RANDOM_ORDER=False,
                PRACTICE_DEFAULT_DIRECTION="BACK_TO_FRONT",
                KNOWN_CARDS_CACHE_MAX_SIZE=5,
            )
        )
    )
    yield container
    container.reset_singletons()


class TestContainer:
    def test_practice_settings_come_from_config(self, wired_container: Container) -> None:
        practice_settings = wired_container.practice_settings()

        assert practice_settings.default_count == 2
        assert practice_settings.default_random_order is False
        assert practice_settings.default_direction is PracticeDirection.BACK_TO_FRONT

    def test_cache_is_shared_between_use_cases(self, wired_container: Container) -> None:
        first = wired_container.progress_use_case()
        second = wired_container.prepare_practice_session_use_case()

        assert first.known_cards_cache is second.progress_use_case.known_cards_cache
        assert first.known_cards_cache is wired_container.known_cards_cache()

    def test_writes_through_one_use_case_evict_for_all(
        self, wired_container: Container, test_deck, card_ids
    ) -> None:
        reader = wired_container.progress_use_case()
        writer = wired_container.progress_use_case()
        assert reader.get_known_card_ids(test_deck.id) == set()

        writer.mark_known(test_deck.id, card_ids["A"])

        assert reader.get_known_card_ids(test_deck.id) == {CardId(card_ids["A"])}

    def test_prepared_session_uses_configured_defaults(
        self, wired_container: Container, test_deck, card_ids
    ) -> None:
        session = wired_container.prepare_practice_session_use_case().start_session(test_deck.id)

        assert [card.id.value for card in session.cards] == [card_ids["A"], card_ids["B"]]
        assert session.prompt_text == "back A"
