"""
Domain-centric repository for Card reads.

Returns domain entities instead of ORM models.
Uses CardMapper internally for conversions.
"""

import logging
from typing import Any

from sqlalchemy import ColumnElement, Select, String, exists, func, or_, select
from sqlalchemy.orm import Session

from flashdeck.domain.common.value_objects import DeckId
from flashdeck.domain.learning.card_filter import CardFilter, KnownState
from flashdeck.domain.learning.entities.card import Card
from flashdeck.infrastructure.learning.mappers.card_mapper import CardMapper
from flashdeck.models import Card as CardORM
from flashdeck.models import KnownCard as KnownCardORM

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _like_pattern(text: str) -> str:
    """Substring pattern with LIKE wildcards in the text taken literally."""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class CardRepository:
    """Repository for Card reads (domain-centric)."""

    def __init__(self, db: Session) -> None:
        """
        Initialize repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db
        self.mapper = CardMapper()

    def list_cards_for_deck(self, deck_id: DeckId) -> list[Card]:
        stmt = select(CardORM).where(CardORM.deck_id == deck_id.value).order_by(CardORM.id)
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def find_by_filter(
        self,
        deck_id: DeckId,
        card_filter: CardFilter,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Card]:
        """
        Search a deck's cards, newest first.

        Args:
            deck_id: The deck ID
            card_filter: Text and known-state predicates
            limit: Maximum number of cards, None for all
            offset: Number of matching cards to skip

        Returns:
            List of matching Card entities
        """
        stmt = self._apply_filter(select(CardORM), deck_id, card_filter)
        stmt = stmt.order_by(CardORM.created_at.desc(), CardORM.id.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def count_by_filter(self, deck_id: DeckId, card_filter: CardFilter) -> int:
        stmt = self._apply_filter(select(func.count(CardORM.id)), deck_id, card_filter)
        return self.db.execute(stmt).scalar() or 0

    def _apply_filter(
        self, stmt: Select[Any], deck_id: DeckId, card_filter: CardFilter
    ) -> Select[Any]:
        """Translate a CardFilter into WHERE clauses."""
        stmt = stmt.where(CardORM.deck_id == deck_id.value)

        if card_filter.search_text is not None:
            stmt = stmt.where(self._text_match(card_filter.search_text))

        is_known = exists().where(
            KnownCardORM.deck_id == CardORM.deck_id,
            KnownCardORM.card_id == CardORM.id,
        )
        if card_filter.known_state is KnownState.KNOWN_ONLY:
            stmt = stmt.where(is_known)
        elif card_filter.known_state is KnownState.UNKNOWN_ONLY:
            stmt = stmt.where(~is_known)

        return stmt

    def _text_match(self, search_text: str) -> ColumnElement[bool]:
        """Case-insensitive substring match over front, back and example."""
        columns = (CardORM.front_text, CardORM.back_text, CardORM.example)

        # casefold() is registered on SQLite connections by create_database_engine
        if self.db.bind is not None and self.db.bind.dialect.name == "sqlite":
            needle = search_text.casefold()
            return or_(
                *(
                    func.casefold(column, type_=String).contains(needle, autoescape=True)
                    for column in columns
                )
            )

        pattern = _like_pattern(search_text)
        return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))
