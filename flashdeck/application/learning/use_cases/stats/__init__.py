from .deck_stats_use_case import DeckStatsUseCase

__all__ = ["DeckStatsUseCase"]
