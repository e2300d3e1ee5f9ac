"""
Domain-centric repository for Deck lookups.

Decks are owned by the surrounding CRUD application; this repository
only reads them.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from flashdeck.domain.common.value_objects import DeckId, UserId
from flashdeck.domain.learning.entities.deck import Deck
from flashdeck.infrastructure.learning.mappers.deck_mapper import DeckMapper
from flashdeck.models import Deck as DeckORM

logger = logging.getLogger(__name__)


class DeckRepository:
    """Repository for Deck lookups (domain-centric)."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = DeckMapper()

    def find_by_id(self, deck_id: DeckId) -> Deck | None:
        stmt = select(DeckORM).where(DeckORM.id == deck_id.value)
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_by_user(self, user_id: UserId) -> list[Deck]:
        stmt = select(DeckORM).where(DeckORM.user_id == user_id.value).order_by(DeckORM.id)
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]
