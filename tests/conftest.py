"""Pytest configuration and fixtures."""

import random
from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session, sessionmaker

from flashdeck import models
from flashdeck.application.learning.use_cases.cards.search_cards_use_case import (
    SearchCardsUseCase,
)
from flashdeck.application.learning.use_cases.practice.complete_practice_session_use_case import (
    CompletePracticeSessionUseCase,
)
from flashdeck.application.learning.use_cases.practice.prepare_practice_session_use_case import (
    PreparePracticeSessionUseCase,
)
from flashdeck.application.learning.use_cases.progress.progress_use_case import ProgressUseCase
from flashdeck.application.learning.use_cases.stats.deck_stats_use_case import DeckStatsUseCase
from flashdeck.database import Base, create_database_engine
from flashdeck.domain.learning.services.completion_metrics_calculator import (
    CompletionMetricsCalculator,
)
from flashdeck.domain.learning.services.practice_card_selector import PracticeCardSelector
from flashdeck.domain.learning.value_objects import PracticeSettings
from flashdeck.infrastructure.learning.cache.known_cards_cache import KnownCardsCache
from flashdeck.infrastructure.learning.repositories import (
    CardRepository,
    DeckRepository,
    ProgressRepository,
)
from flashdeck.infrastructure.unit_of_work import SqlAlchemyUnitOfWork

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

START_TIME = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: datetime = START_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    engine = create_database_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_deck(db_session: Session) -> models.Deck:
    """Deck with cards A to E, created in that order."""
    deck = models.Deck(user_id=1, title="Spanish basics")
    db_session.add(deck)
    db_session.flush()

    for offset, letter in enumerate("ABCDE"):
        db_session.add(
            models.Card(
                deck_id=deck.id,
                front_text=f"front {letter}",
                back_text=f"back {letter}",
                created_at=START_TIME + timedelta(minutes=offset),
            )
        )
    db_session.commit()
    db_session.refresh(deck)
    return deck


@pytest.fixture
def card_ids(test_deck: models.Deck) -> dict[str, int]:
    """Card IDs of the test deck keyed by letter."""
    return {card.front_text.removeprefix("front "): card.id for card in test_deck.cards}


@pytest.fixture
def other_deck(db_session: Session) -> models.Deck:
    deck = models.Deck(user_id=1, title="German verbs")
    db_session.add(deck)
    db_session.flush()
    for word in ("gehen", "sehen"):
        db_session.add(models.Card(deck_id=deck.id, front_text=word, back_text=f"{word} (en)"))
    db_session.commit()
    db_session.refresh(deck)
    return deck


@pytest.fixture
def known_cards_cache() -> KnownCardsCache:
    return KnownCardsCache(ttl_seconds=300, max_size=100)


@pytest.fixture
def unit_of_work(db_session: Session, known_cards_cache: KnownCardsCache) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(db_session, [known_cards_cache.on_progress_changed])


@pytest.fixture
def progress_repository(db_session: Session) -> ProgressRepository:
    return ProgressRepository(db_session)


@pytest.fixture
def card_repository(db_session: Session) -> CardRepository:
    return CardRepository(db_session)


@pytest.fixture
def deck_repository(db_session: Session) -> DeckRepository:
    return DeckRepository(db_session)


@pytest.fixture
def progress_use_case(
    progress_repository: ProgressRepository,
    deck_repository: DeckRepository,
    known_cards_cache: KnownCardsCache,
    unit_of_work: SqlAlchemyUnitOfWork,
    clock: FakeClock,
) -> ProgressUseCase:
    return ProgressUseCase(
        progress_repository=progress_repository,
        deck_repository=deck_repository,
        known_cards_cache=known_cards_cache,
        unit_of_work=unit_of_work,
        clock=clock,
    )


@pytest.fixture
def prepare_use_case(
    card_repository: CardRepository,
    progress_use_case: ProgressUseCase,
    clock: FakeClock,
) -> PreparePracticeSessionUseCase:
    return PreparePracticeSessionUseCase(
        card_repository=card_repository,
        progress_use_case=progress_use_case,
        practice_settings=PracticeSettings(default_count=3, default_random_order=False),
        card_selector=PracticeCardSelector(random.Random(1234)),
        clock=clock,
    )


@pytest.fixture
def complete_use_case(progress_use_case: ProgressUseCase) -> CompletePracticeSessionUseCase:
    return CompletePracticeSessionUseCase(
        progress_use_case=progress_use_case,
        metrics_calculator=CompletionMetricsCalculator(),
    )


@pytest.fixture
def deck_stats_use_case(
    progress_repository: ProgressRepository,
    deck_repository: DeckRepository,
    clock: FakeClock,
) -> DeckStatsUseCase:
    return DeckStatsUseCase(
        progress_repository=progress_repository,
        deck_repository=deck_repository,
        clock=clock,
    )


@pytest.fixture
def search_cards_use_case(card_repository: CardRepository) -> SearchCardsUseCase:
    return SearchCardsUseCase(card_repository=card_repository)
