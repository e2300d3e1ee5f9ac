from .known_cards_cache import CacheStats, KnownCardsCache

__all__ = ["CacheStats", "KnownCardsCache"]
