"""
Bank Dice - Application Settings

Loads configuration from environment variables using Pydantic Settings.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from src.engine.rules import MAX_ROUNDS, MIN_ROUNDS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Game defaults
    default_rounds: int = Field(default=20, ge=MIN_ROUNDS, le=MAX_ROUNDS)
    # Reject odd Doubles totals before they reach the engine
    strict_doubles: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()
