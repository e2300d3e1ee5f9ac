"""
Card entity, read from the card store.
"""

from dataclasses import dataclass
from datetime import datetime

from flashdeck.domain.common.entity import Entity
from flashdeck.domain.common.value_objects import CardId, DeckId


@dataclass(frozen=True, eq=False)
class Card(Entity[CardId]):
    """
    A flashcard owned by exactly one deck.

    Cards are immutable for the duration of a practice session. The card
    store owns their content, so blank sides are carried as they are.
    """

    id: CardId
    deck_id: DeckId
    front_text: str
    back_text: str
    example: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def create_with_id(
        cls,
        id: CardId,
        deck_id: DeckId,
        front_text: str,
        back_text: str,
        example: str | None = None,
        image_url: str | None = None,
        created_at: datetime | None = None,
    ) -> "Card":
        """Reconstitute a card from persistence."""
        return cls(
            id=id,
            deck_id=deck_id,
            front_text=front_text,
            back_text=back_text,
            example=example,
            image_url=image_url,
            created_at=created_at,
        )
