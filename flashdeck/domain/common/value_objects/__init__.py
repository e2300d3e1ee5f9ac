"""Common value objects shared across all domain modules."""

from .ids import CardId, DeckId, UserId

__all__ = [
    "CardId",
    "DeckId",
    "UserId",
]
