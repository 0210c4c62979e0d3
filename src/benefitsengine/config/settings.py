"""Application settings and configuration."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """Rate store configuration."""

    path: str = "benefits.db"
    timeout_seconds: float = Field(default=30.0, gt=0)


class EngineSettings(BaseModel):
    """Enrollment and renewal engine configuration."""

    max_classes: int = Field(default=3, ge=1)
    money_places: int = Field(default=2, ge=0)


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # Rate store
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    # Engine
    engine: EngineSettings = Field(default_factory=EngineSettings)

    # Logging
    log_level: str = "INFO"

    def __init__(self, **data: Any) -> None:
        """Initialize settings with environment variable overrides."""
        super().__init__(**data)
        self._load_env_overrides()

    def _load_env_overrides(self) -> None:
        """Load flat environment variable overrides for nested settings."""
        if path := os.getenv("BENEFITS_DB_PATH"):
            self.database.path = path
        if timeout := os.getenv("BENEFITS_DB_TIMEOUT"):
            self.database.timeout_seconds = float(timeout)

        if classes := os.getenv("BENEFITS_MAX_CLASSES"):
            self.engine.max_classes = int(classes)
        if places := os.getenv("BENEFITS_MONEY_PLACES"):
            self.engine.money_places = int(places)
