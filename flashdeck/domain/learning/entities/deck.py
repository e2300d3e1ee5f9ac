"""
Deck entity, read-only view used for ownership and audit lookups.
"""

from dataclasses import dataclass

from flashdeck.domain.common.entity import Entity
from flashdeck.domain.common.value_objects import DeckId, UserId


@dataclass(frozen=True, eq=False)
class Deck(Entity[DeckId]):
    """A named collection of cards owned by one user."""

    id: DeckId
    user_id: UserId
    title: str
