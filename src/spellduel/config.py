"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    database_url: str = "sqlite+aiosqlite:///spellduel.db"

    debug: bool = False

    # Match Configuration
    max_health: int = Field(default=100, gt=0)  # Starting health of both combatants
    round_delay_ms: int = Field(default=1000, ge=0)  # Simulated latency before a round resolves
    catalog_path: str | None = None  # JSON file with effect records, overrides the database catalog
    rng_seed: int | None = None  # Seed for the opponent policy, random when unset

    @property
    def round_delay(self) -> float:
        """Round delay in seconds."""
        return self.round_delay_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
