"""Mapper for Card ORM ↔ Domain conversion."""

from flashdeck.domain.common.value_objects import CardId, DeckId
from flashdeck.domain.learning.entities.card import Card
from flashdeck.models import Card as CardORM


class CardMapper:
    """Mapper for Card ORM → Domain conversion. Cards are never written back."""

    def to_domain(self, orm_model: CardORM) -> Card:
        """Convert ORM model to domain entity."""
        return Card.create_with_id(
            id=CardId(orm_model.id),
            deck_id=DeckId(orm_model.deck_id),
            front_text=orm_model.front_text,
            back_text=orm_model.back_text,
            example=orm_model.example,
            image_url=orm_model.image_url,
            created_at=orm_model.created_at,
        )
