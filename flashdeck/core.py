from dependency_injector import containers, providers
from sqlalchemy.orm import Session

from flashdeck.application.common.clock import utc_now
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
from flashdeck.config import Settings, get_settings
from flashdeck.domain.learning.services.completion_metrics_calculator import (
    CompletionMetricsCalculator,
)
from flashdeck.domain.learning.services.practice_card_selector import PracticeCardSelector
from flashdeck.domain.learning.value_objects import PracticeDirection, PracticeSettings
from flashdeck.infrastructure.learning.cache.known_cards_cache import KnownCardsCache
from flashdeck.infrastructure.learning.repositories import (
    CardRepository,
    DeckRepository,
    ProgressRepository,
)
from flashdeck.infrastructure.unit_of_work import SqlAlchemyUnitOfWork


def build_practice_settings(settings: Settings) -> PracticeSettings:
    return PracticeSettings(
        default_count=settings.PRACTICE_DEFAULT_COUNT,
        default_random_order=settings.PRACTICE_DEFAULT_RANDOM_ORDER,
        default_direction=PracticeDirection(settings.PRACTICE_DEFAULT_DIRECTION),
    )


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Declare db as a dependency that will be provided at runtime
    db = providers.Dependency(instance_of=Session)

    settings = providers.Singleton(get_settings)
    clock = providers.Object(utc_now)

    # Repositories
    card_repository = providers.Factory(CardRepository, db=db)
    deck_repository = providers.Factory(DeckRepository, db=db)
    progress_repository = providers.Factory(ProgressRepository, db=db)

    # Shared by every request; evicted by the unit of work after each progress commit
    known_cards_cache = providers.Singleton(
        KnownCardsCache,
        ttl_seconds=settings.provided.KNOWN_CARDS_CACHE_TTL_SECONDS,
        max_size=settings.provided.KNOWN_CARDS_CACHE_MAX_SIZE,
    )

    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork,
        db=db,
        event_handlers=providers.List(known_cards_cache.provided.on_progress_changed),
    )

    # Domain services (pure domain logic, no db)
    practice_settings = providers.Singleton(build_practice_settings, settings)
    practice_card_selector = providers.Factory(PracticeCardSelector)
    completion_metrics_calculator = providers.Factory(CompletionMetricsCalculator)

    # Learning module, application use cases
    progress_use_case = providers.Factory(
        ProgressUseCase,
        progress_repository=progress_repository,
        deck_repository=deck_repository,
        known_cards_cache=known_cards_cache,
        unit_of_work=unit_of_work,
        clock=clock,
        stats_timezone=settings.provided.STATS_TIMEZONE,
    )
    prepare_practice_session_use_case = providers.Factory(
        PreparePracticeSessionUseCase,
        card_repository=card_repository,
        progress_use_case=progress_use_case,
        practice_settings=practice_settings,
        card_selector=practice_card_selector,
        clock=clock,
    )
    complete_practice_session_use_case = providers.Factory(
        CompletePracticeSessionUseCase,
        progress_use_case=progress_use_case,
        metrics_calculator=completion_metrics_calculator,
    )
    deck_stats_use_case = providers.Factory(
        DeckStatsUseCase,
        progress_repository=progress_repository,
        deck_repository=deck_repository,
        clock=clock,
        stats_timezone=settings.provided.STATS_TIMEZONE,
    )
    search_cards_use_case = providers.Factory(
        SearchCardsUseCase,
        card_repository=card_repository,
    )


container = Container()
