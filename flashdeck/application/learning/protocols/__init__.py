from .card_repository import CardRepositoryProtocol
from .deck_repository import DeckRepositoryProtocol
from .known_cards_cache import KnownCardsCacheProtocol
from .progress_repository import ProgressRepositoryProtocol

__all__ = [
    "CardRepositoryProtocol",
    "DeckRepositoryProtocol",
    "KnownCardsCacheProtocol",
    "ProgressRepositoryProtocol",
]
