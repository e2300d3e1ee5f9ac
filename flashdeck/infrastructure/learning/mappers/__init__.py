from .card_mapper import CardMapper
from .daily_stats_mapper import DailyStatsMapper
from .deck_mapper import DeckMapper

__all__ = ["CardMapper", "DailyStatsMapper", "DeckMapper"]
