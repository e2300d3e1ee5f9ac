from .search_cards_use_case import SearchCardsUseCase

__all__ = ["SearchCardsUseCase"]
