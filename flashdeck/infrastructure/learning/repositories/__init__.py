from .card_repository import CardRepository
from .deck_repository import DeckRepository
from .progress_repository import ProgressRepository

__all__ = ["CardRepository", "DeckRepository", "ProgressRepository"]
