"""
In-memory read-through cache of known-card sets, keyed by deck.

Entries are bounded by count (least recently used goes first) and by a
time-to-live. Progress writes evict the deck synchronously through
``on_progress_changed``, which the unit of work calls after commit.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Collection
from dataclasses import dataclass

import structlog

from flashdeck.application.learning.protocols.known_cards_cache import (
    KnownCardsBatchLoader,
    KnownCardsLoader,
)
from flashdeck.domain.common import DomainEvent
from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.events import ProgressChanged

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Counters since the cache was created or last cleared."""

    hits: int
    misses: int
    evictions: int
    size: int

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


@dataclass(frozen=True)
class _Entry:
    card_ids: frozenset[CardId]
    expires_at: float


class KnownCardsCache:
    """
    Thread-safe read-through cache of known-card sets.

    Loaders run outside the lock. A load that overlaps an invalidation
    is returned to its caller but not stored, so an eviction can never
    be undone by a slower read that started before it.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self._ttl_seconds = ttl_seconds
        self._max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[DeckId, _Entry] = OrderedDict()
        self._epoch = 0
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get_known_cards(
        self, deck_id: DeckId, loader: KnownCardsLoader, *, force_reload: bool = False
    ) -> frozenset[CardId]:
        """
        Return the deck's known-card set.

        Args:
            deck_id: Deck to look up
            loader: Reads the set from the progress store on a miss
            force_reload: Skip the cached entry and refresh it from the loader

        Returns:
            Immutable set of known card IDs
        """
        with self._lock:
            if not force_reload:
                cached = self._lookup(deck_id)
                if cached is not None:
                    self._hits += 1
                    return cached
            self._misses += 1
            epoch = self._epoch

        card_ids = frozenset(loader())

        with self._lock:
            if self._epoch == epoch:
                self._store(deck_id, card_ids)
        if force_reload:
            logger.info("known_cards_cache_reloaded", deck_id=deck_id.value)
        return card_ids

    def get_known_cards_batch(
        self, deck_ids: Collection[DeckId], batch_loader: KnownCardsBatchLoader
    ) -> dict[DeckId, frozenset[CardId]]:
        """
        Return known-card sets for several decks.

        Cached decks are served from memory; all misses are loaded with a
        single ``batch_loader`` call. Decks without known cards are omitted
        from the result, but their emptiness is cached.
        """
        requested = list(dict.fromkeys(deck_ids))
        result: dict[DeckId, frozenset[CardId]] = {}
        missing: list[DeckId] = []

        with self._lock:
            for deck_id in requested:
                cached = self._lookup(deck_id)
                if cached is None:
                    self._misses += 1
                    missing.append(deck_id)
                    continue
                self._hits += 1
                if cached:
                    result[deck_id] = cached
            epoch = self._epoch

        if not missing:
            return result

        loaded = batch_loader(missing)
        fresh = {deck_id: frozenset(loaded.get(deck_id, ())) for deck_id in missing}

        with self._lock:
            if self._epoch == epoch:
                for deck_id, card_ids in fresh.items():
                    self._store(deck_id, card_ids)

        for deck_id, card_ids in fresh.items():
            if card_ids:
                result[deck_id] = card_ids
        return result

    def invalidate(self, deck_id: DeckId) -> None:
        """Evict one deck. Evicting an absent deck is a no-op."""
        with self._lock:
            self._epoch += 1
            removed = self._entries.pop(deck_id, None) is not None
        logger.debug("known_cards_cache_invalidated", deck_id=deck_id.value, removed=removed)

    def invalidate_all(self) -> None:
        with self._lock:
            self._epoch += 1
            self._entries.clear()
        logger.debug("known_cards_cache_cleared")

    def on_progress_changed(self, event: DomainEvent) -> None:
        """Unit-of-work event handler evicting the deck a progress write touched."""
        if isinstance(event, ProgressChanged):
            self.invalidate(event.deck_id)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._entries),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _lookup(self, deck_id: DeckId) -> frozenset[CardId] | None:
        """Live entry for a deck, refreshing its recency. Caller holds the lock."""
        entry = self._entries.get(deck_id)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[deck_id]
            return None
        self._entries.move_to_end(deck_id)
        return entry.card_ids

    def _store(self, deck_id: DeckId, card_ids: frozenset[CardId]) -> None:
        """Insert or replace an entry, evicting the least recently used. Caller holds the lock."""
        self._entries[deck_id] = _Entry(card_ids, self._clock() + self._ttl_seconds)
        self._entries.move_to_end(deck_id)
        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)
            self._evictions += 1
