"""Tests for ProgressUseCase and known-cards cache coherence."""

import pytest
from sqlalchemy.orm import Session

from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.stats import SessionStats
from flashdeck.exceptions import DeckNotFoundError
from flashdeck.infrastructure.learning.repositories import ProgressRepository


class TestCacheCoherence:
    def test_mark_known_is_visible_immediately(
        self, progress_use_case, known_cards_cache, test_deck, card_ids
    ) -> None:
        assert progress_use_case.get_known_card_ids(test_deck.id) == set()
        assert known_cards_cache.stats().size == 1

        progress_use_case.mark_known(test_deck.id, card_ids["A"])

        assert progress_use_case.get_known_card_ids(test_deck.id) == {CardId(card_ids["A"])}

    def test_unmark_known_is_visible_immediately(
        self, progress_use_case, test_deck, card_ids
    ) -> None:
        progress_use_case.mark_known(test_deck.id, card_ids["A"])
        progress_use_case.get_known_card_ids(test_deck.id)

        progress_use_case.unmark_known(test_deck.id, card_ids["A"])

        assert progress_use_case.get_known_card_ids(test_deck.id) == set()

    def test_recorded_session_is_visible_in_batch_reads(
        self, progress_use_case, test_deck, other_deck, card_ids
    ) -> None:
        assert progress_use_case.get_known_card_ids_batch([test_deck.id, other_deck.id]) == {}

        progress_use_case.record_session(
            SessionStats(
                deck_id=DeckId(test_deck.id),
                viewed=1,
                correct=1,
                known_card_ids_delta=(CardId(card_ids["E"]),),
            )
        )

        assert progress_use_case.get_known_card_ids_batch([test_deck.id, other_deck.id]) == {
            DeckId(test_deck.id): {CardId(card_ids["E"])}
        }

    def test_mark_known_in_one_deck_keeps_other_decks_cached(
        self, progress_use_case, known_cards_cache, test_deck, other_deck, card_ids
    ) -> None:
        progress_use_case.get_known_card_ids(other_deck.id)

        progress_use_case.mark_known(test_deck.id, card_ids["A"])
        progress_use_case.get_known_card_ids(other_deck.id)

        assert known_cards_cache.stats().hits == 1

    def test_force_reload_repairs_out_of_band_writes(
        self, db_session: Session, progress_use_case, test_deck, card_ids
    ) -> None:
        progress_use_case.get_known_card_ids(test_deck.id)
        # Written without going through the use case, so no eviction happens
        ProgressRepository(db_session).mark_known(DeckId(test_deck.id), CardId(card_ids["D"]))
        db_session.commit()

        assert progress_use_case.get_known_card_ids(test_deck.id) == set()
        assert progress_use_case.get_known_card_ids(test_deck.id, force_reload=True) == {
            CardId(card_ids["D"])
        }


class TestKnownStatus:
    def test_is_card_known_reads_the_store(self, progress_use_case, test_deck, card_ids) -> None:
        progress_use_case.mark_known(test_deck.id, card_ids["C"])

        assert progress_use_case.is_card_known(test_deck.id, card_ids["C"])
        assert not progress_use_case.is_card_known(test_deck.id, card_ids["D"])

    def test_set_card_known(self, progress_use_case, test_deck, card_ids) -> None:
        progress_use_case.set_card_known(test_deck.id, card_ids["A"], True)
        assert progress_use_case.is_card_known(test_deck.id, card_ids["A"])

        progress_use_case.set_card_known(test_deck.id, card_ids["A"], False)
        assert not progress_use_case.is_card_known(test_deck.id, card_ids["A"])

    def test_toggle_card_known(self, progress_use_case, test_deck, card_ids) -> None:
        assert progress_use_case.toggle_card_known(test_deck.id, card_ids["B"]) is True
        assert progress_use_case.get_known_card_ids(test_deck.id) == {CardId(card_ids["B"])}

        assert progress_use_case.toggle_card_known(test_deck.id, card_ids["B"]) is False
        assert progress_use_case.get_known_card_ids(test_deck.id) == set()

    def test_marking_twice_keeps_one_known_card(self, progress_use_case, test_deck, card_ids) -> None:
        progress_use_case.mark_known(test_deck.id, card_ids["A"])
        progress_use_case.mark_known(test_deck.id, card_ids["A"])

        assert progress_use_case.get_known_card_ids(test_deck.id) == {CardId(card_ids["A"])}


class TestDeckProgressPercent:
    def test_percent_of_known_cards(self, progress_use_case, test_deck, card_ids) -> None:
        assert progress_use_case.get_deck_progress_percent(test_deck.id, 5) == 0

        progress_use_case.mark_known(test_deck.id, card_ids["A"])
        progress_use_case.mark_known(test_deck.id, card_ids["B"])

        assert progress_use_case.get_deck_progress_percent(test_deck.id, 5) == 40
        assert progress_use_case.get_deck_progress_percent(test_deck.id, 3) == 67

    def test_percent_is_clamped(self, progress_use_case, test_deck, card_ids) -> None:
        for letter in "ABC":
            progress_use_case.mark_known(test_deck.id, card_ids[letter])

        assert progress_use_case.get_deck_progress_percent(test_deck.id, 2) == 100
        assert progress_use_case.get_deck_progress_percent(test_deck.id, 0) == 0
        assert progress_use_case.get_deck_progress_percent(test_deck.id, -4) == 0


class TestReset:
    def test_reset_clears_progress_and_cache(
        self, progress_use_case, test_deck, card_ids
    ) -> None:
        progress_use_case.record_session(
            SessionStats(
                deck_id=DeckId(test_deck.id),
                viewed=2,
                correct=2,
                known_card_ids_delta=(CardId(card_ids["A"]), CardId(card_ids["B"])),
            )
        )
        assert len(progress_use_case.get_known_card_ids(test_deck.id)) == 2

        removed = progress_use_case.reset_deck_progress(test_deck.id)

        assert removed == 2
        assert progress_use_case.get_known_card_ids(test_deck.id) == set()
        assert progress_use_case.get_daily_stats(test_deck.id) == []

    def test_reset_of_missing_deck(self, progress_use_case) -> None:
        with pytest.raises(DeckNotFoundError, match="Deck with id 404 not found"):
            progress_use_case.reset_deck_progress(404)


class TestRecordSession:
    def test_record_session_writes_known_cards_and_stats_together(
        self, progress_use_case, test_deck, card_ids, clock
    ) -> None:
        progress_use_case.record_session(
            SessionStats(
                deck_id=DeckId(test_deck.id),
                viewed=4,
                correct=1,
                repeat=2,
                hard=1,
                session_duration_ms=120_000,
                total_answer_delay_ms=8_000,
                known_card_ids_delta=(CardId(card_ids["C"]),),
            )
        )

        [record] = progress_use_case.get_daily_stats(test_deck.id)
        assert record.date == clock.now.date()
        assert (record.viewed, record.correct, record.repeat, record.hard) == (4, 1, 2, 1)
        assert record.total_duration_ms == 120_000
        assert record.total_answer_delay_ms == 8_000
        assert progress_use_case.is_card_known(test_deck.id, card_ids["C"])

    def test_new_day_starts_a_new_record(self, progress_use_case, test_deck, clock) -> None:
        stats = SessionStats(deck_id=DeckId(test_deck.id), viewed=1, hard=1)

        progress_use_case.record_session(stats)
        clock.advance(days=1)
        progress_use_case.record_session(stats)

        records = progress_use_case.get_daily_stats(test_deck.id)
        assert [record.sessions for record in records] == [1, 1]
        assert records[0].date < records[1].date
