"""SQLAlchemy ORM models."""

from datetime import UTC, date, datetime

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flashdeck.database import Base


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Deck(Base):
    """Deck owned by a user. Maintained by the surrounding CRUD application."""

    __tablename__ = "decks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )

    cards: Mapped[list["Card"]] = relationship(
        back_populates="deck", cascade="all, delete-orphan", passive_deletes=True
    )


class Card(Base):
    """Card content. Read-only from the practice engine's perspective."""

    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[int] = mapped_column(
        ForeignKey("decks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    front_text: Mapped[str] = mapped_column(String(300), nullable=False)
    back_text: Mapped[str] = mapped_column(String(300), nullable=False)
    example: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )

    deck: Mapped[Deck] = relationship(back_populates="cards")


class KnownCard(Base):
    """A card a learner has marked as known in a deck."""

    __tablename__ = "known_cards"
    __table_args__ = (UniqueConstraint("deck_id", "card_id", name="uq_known_cards_deck_card"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[int] = mapped_column(
        ForeignKey("decks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    card_id: Mapped[int] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now
    )


class DeckDailyStats(Base):
    """Additive per-day practice counters for a deck."""

    __tablename__ = "deck_daily_stats"
    __table_args__ = (
        UniqueConstraint("deck_id", "date", name="uq_deck_daily_stats_deck_date"),
        Index("ix_deck_daily_stats_deck_id_date", "deck_id", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[int] = mapped_column(
        ForeignKey("decks.id", ondelete="CASCADE"), nullable=False
    )
    stat_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    viewed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    repeat: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hard: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_duration_ms: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_delay_ms: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
