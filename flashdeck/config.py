"""Application configuration."""

import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Database
    DATABASE_URL: str = "sqlite:///./flashdeck.db"

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    # Practice defaults
    PRACTICE_DEFAULT_COUNT: int = 10
    PRACTICE_DEFAULT_RANDOM_ORDER: bool = True
    PRACTICE_DEFAULT_DIRECTION: Literal["FRONT_TO_BACK", "BACK_TO_FRONT"] = "FRONT_TO_BACK"

    # Known cards cache
    KNOWN_CARDS_CACHE_TTL_SECONDS: float = 300.0
    KNOWN_CARDS_CACHE_MAX_SIZE: int = 1000

    # Daily stats are bucketed by the calendar date in this zone
    STATS_TIMEZONE: str = "UTC"

    @field_validator("PRACTICE_DEFAULT_COUNT", "KNOWN_CARDS_CACHE_MAX_SIZE", mode="after")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Reject non-positive sizes."""
        if value < 1:
            msg = "must be at least 1"
            raise ValueError(msg)
        return value

    @field_validator("KNOWN_CARDS_CACHE_TTL_SECONDS", mode="after")
    @classmethod
    def validate_ttl(cls, value: float) -> float:
        """Reject non-positive time-to-live."""
        if value <= 0:
            msg = "KNOWN_CARDS_CACHE_TTL_SECONDS must be positive"
            raise ValueError(msg)
        return value


def configure_logging(environment: str = "development") -> None:
    """Configure structured logging with structlog."""
    # Determine if we should use JSON output (production) or console output (dev)
    use_json = environment == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
