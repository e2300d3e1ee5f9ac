"""Mapper for Deck ORM ↔ Domain conversion."""

from flashdeck.domain.common.value_objects import DeckId, UserId
from flashdeck.domain.learning.entities.deck import Deck
from flashdeck.models import Deck as DeckORM


class DeckMapper:
    def to_domain(self, orm_model: DeckORM) -> Deck:
        """Convert ORM model to domain entity."""
        return Deck(
            id=DeckId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            title=orm_model.title,
        )
