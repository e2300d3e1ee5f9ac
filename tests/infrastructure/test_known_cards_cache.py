"""Tests for KnownCardsCache."""

import threading

import pytest

from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.events import ProgressChanged
from flashdeck.infrastructure.learning.cache.known_cards_cache import KnownCardsCache

DECK = DeckId(1)


class FakeMonotonic:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class CountingLoader:
    def __init__(self, card_ids: set[int]) -> None:
        self.card_ids = card_ids
        self.calls = 0

    def __call__(self) -> set[CardId]:
        self.calls += 1
        return {CardId(card_id) for card_id in self.card_ids}


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def cache(monotonic: FakeMonotonic) -> KnownCardsCache:
    return KnownCardsCache(ttl_seconds=60, max_size=3, clock=monotonic)


class TestReadThrough:
    def test_miss_loads_and_hit_serves_from_memory(self, cache: KnownCardsCache) -> None:
        loader = CountingLoader({1, 2})

        first = cache.get_known_cards(DECK, loader)
        second = cache.get_known_cards(DECK, loader)

        assert first == second == {CardId(1), CardId(2)}
        assert isinstance(first, frozenset)
        assert loader.calls == 1
        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.size) == (1, 1, 1)
        assert stats.hit_rate == 0.5

    def test_empty_sets_are_cached(self, cache: KnownCardsCache) -> None:
        loader = CountingLoader(set())

        cache.get_known_cards(DECK, loader)
        cache.get_known_cards(DECK, loader)

        assert loader.calls == 1

    def test_expired_entry_is_reloaded(
        self, cache: KnownCardsCache, monotonic: FakeMonotonic
    ) -> None:
        loader = CountingLoader({1})
        cache.get_known_cards(DECK, loader)

        monotonic.now += 61
        loader.card_ids = {1, 2}

        assert cache.get_known_cards(DECK, loader) == {CardId(1), CardId(2)}
        assert loader.calls == 2

    def test_force_reload_bypasses_entry_and_refreshes_it(self, cache: KnownCardsCache) -> None:
        loader = CountingLoader({1})
        cache.get_known_cards(DECK, loader)
        loader.card_ids = {1, 5}

        reloaded = cache.get_known_cards(DECK, loader, force_reload=True)
        cached = cache.get_known_cards(DECK, loader)

        assert reloaded == cached == {CardId(1), CardId(5)}
        assert loader.calls == 2

    def test_loader_errors_propagate_and_nothing_is_cached(self, cache: KnownCardsCache) -> None:
        def failing_loader() -> set[CardId]:
            raise RuntimeError("store unavailable")

        with pytest.raises(RuntimeError, match="store unavailable"):
            cache.get_known_cards(DECK, failing_loader)

        assert len(cache) == 0

    def test_least_recently_used_deck_is_evicted(self, cache: KnownCardsCache) -> None:
        loaders = {deck: CountingLoader({deck}) for deck in range(1, 5)}
        for deck in (1, 2, 3):
            cache.get_known_cards(DeckId(deck), loaders[deck])
        cache.get_known_cards(DeckId(1), loaders[1])

        cache.get_known_cards(DeckId(4), loaders[4])

        assert len(cache) == 3
        assert cache.stats().evictions == 1
        cache.get_known_cards(DeckId(1), loaders[1])
        cache.get_known_cards(DeckId(2), loaders[2])
        assert loaders[1].calls == 1
        assert loaders[2].calls == 2


class TestInvalidation:
    def test_invalidate_forces_next_read_to_load(self, cache: KnownCardsCache) -> None:
        loader = CountingLoader({1})
        cache.get_known_cards(DECK, loader)
        loader.card_ids = {1, 2}

        cache.invalidate(DECK)

        assert cache.get_known_cards(DECK, loader) == {CardId(1), CardId(2)}
        assert loader.calls == 2

    def test_duplicate_invalidation_is_harmless(self, cache: KnownCardsCache) -> None:
        cache.invalidate(DECK)
        cache.invalidate(DECK)

        assert len(cache) == 0

    def test_invalidate_leaves_other_decks(self, cache: KnownCardsCache) -> None:
        other = CountingLoader({9})
        cache.get_known_cards(DECK, CountingLoader({1}))
        cache.get_known_cards(DeckId(2), other)

        cache.invalidate(DECK)
        cache.get_known_cards(DeckId(2), other)

        assert other.calls == 1

    def test_progress_changed_event_evicts_deck(self, cache: KnownCardsCache) -> None:
        loader = CountingLoader({1})
        cache.get_known_cards(DECK, loader)

        cache.on_progress_changed(ProgressChanged(deck_id=DECK))
        cache.get_known_cards(DECK, loader)

        assert loader.calls == 2

    def test_invalidate_all(self, cache: KnownCardsCache) -> None:
        cache.get_known_cards(DECK, CountingLoader({1}))
        cache.get_known_cards(DeckId(2), CountingLoader({2}))

        cache.invalidate_all()

        assert len(cache) == 0

    def test_load_racing_with_invalidation_is_not_stored(self, cache: KnownCardsCache) -> None:
        calls = []

        def loader() -> set[CardId]:
            calls.append(1)
            # A writer commits and evicts while this read is in flight
            cache.invalidate(DECK)
            return {CardId(1)}

        assert cache.get_known_cards(DECK, loader) == {CardId(1)}
        assert len(cache) == 0
        cache.get_known_cards(DECK, loader)
        assert len(calls) == 2


class TestBatch:
    def test_batch_loads_all_misses_in_one_call(self, cache: KnownCardsCache) -> None:
        calls: list[list[DeckId]] = []

        def batch_loader(deck_ids: list[DeckId]) -> dict[DeckId, set[CardId]]:
            calls.append(deck_ids)
            return {DeckId(1): {CardId(10)}, DeckId(3): {CardId(30), CardId(31)}}

        result = cache.get_known_cards_batch([DeckId(1), DeckId(2), DeckId(3)], batch_loader)

        assert result == {
            DeckId(1): frozenset({CardId(10)}),
            DeckId(3): frozenset({CardId(30), CardId(31)}),
        }
        assert calls == [[DeckId(1), DeckId(2), DeckId(3)]]

    def test_batch_uses_cached_entries_and_remembers_empty_decks(
        self, cache: KnownCardsCache
    ) -> None:
        calls: list[list[DeckId]] = []

        def batch_loader(deck_ids: list[DeckId]) -> dict[DeckId, set[CardId]]:
            calls.append(deck_ids)
            return {}

        cache.get_known_cards(DeckId(1), CountingLoader({1}))
        cache.get_known_cards_batch([DeckId(1), DeckId(2)], batch_loader)
        result = cache.get_known_cards_batch([DeckId(1), DeckId(2)], batch_loader)

        assert calls == [[DeckId(2)]]
        assert result == {DeckId(1): frozenset({CardId(1)})}

    def test_batch_agrees_with_single_reads(self, cache: KnownCardsCache) -> None:
        def batch_loader(deck_ids: list[DeckId]) -> dict[DeckId, set[CardId]]:
            return {DeckId(2): {CardId(20)}}

        batch = cache.get_known_cards_batch([DeckId(2)], batch_loader)

        assert cache.get_known_cards(DeckId(2), CountingLoader(set())) == batch[DeckId(2)]


class TestConfiguration:
    @pytest.mark.parametrize(("ttl", "size"), [(0, 10), (-1, 10), (60, 0)])
    def test_rejects_invalid_bounds(self, ttl: float, size: int) -> None:
        with pytest.raises(ValueError):
            KnownCardsCache(ttl_seconds=ttl, max_size=size)


def test_concurrent_readers_and_invalidations() -> None:
    cache = KnownCardsCache(ttl_seconds=60, max_size=10)
    loader = CountingLoader({1, 2, 3})
    errors: list[Exception] = []

    def reader() -> None:
        try:
            for _ in range(200):
                assert cache.get_known_cards(DECK, loader) == {CardId(1), CardId(2), CardId(3)}
        except Exception as e:  # noqa: BLE001
            errors.append(e)

    def invalidator() -> None:
        for _ in range(200):
            cache.invalidate(DECK)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    threads.append(threading.Thread(target=invalidator))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
