"""Runtime settings for FM Career."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent.resolve()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "FM Career"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="FM_CAREER_LOG_LEVEL",
    )

    # Simulation
    seed: Optional[int] = Field(default=None, alias="FM_CAREER_SEED")
    balance_path: Optional[Path] = Field(default=None, alias="FM_CAREER_BALANCE_PATH")
    matches_per_season: int = Field(default=38, alias="FM_CAREER_MATCHES_PER_SEASON")
    workers: int = Field(default=1, alias="FM_CAREER_WORKERS")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
