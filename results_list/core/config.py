"""Application configuration loaded from environment variables."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from results_list.schemas.rows import COLUMN_KEYS

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Defaults for the persisted view settings; the settings source seeds itself from these.
    RESULTS_LIST_HIDE_COLUMNS: list[str] = ["resultId", "ruleName", "runId", "sarifFile"]
    RESULTS_LIST_GROUP_BY: str = "resultFile"
    RESULTS_LIST_SORT_COLUMN: str = "severityLevel"
    RESULTS_LIST_SORT_ASCENDING: bool = True

    # Shown in the file column for results without a location.
    NO_LOCATION_TEXT: str = "No Location"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if not v or v.strip().upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return v.strip().upper()

    @field_validator("RESULTS_LIST_HIDE_COLUMNS")
    @classmethod
    def validate_hide_columns(cls, v: list[str]) -> list[str]:
        unknown = [c for c in v if c not in COLUMN_KEYS]
        if unknown:
            raise ValueError(
                f"RESULTS_LIST_HIDE_COLUMNS contains unknown columns {unknown}; valid columns: {list(COLUMN_KEYS)}"
            )
        return list(dict.fromkeys(v))

    @field_validator("RESULTS_LIST_GROUP_BY", "RESULTS_LIST_SORT_COLUMN")
    @classmethod
    def validate_column_key(cls, v: str) -> str:
        if v not in COLUMN_KEYS:
            raise ValueError(f"column must be one of {list(COLUMN_KEYS)}, got {v!r}")
        return v

    @field_validator("NO_LOCATION_TEXT")
    @classmethod
    def validate_no_location_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("NO_LOCATION_TEXT must be set and non-empty")
        return v

    @property
    def log_level_value(self) -> int:
        """LOG_LEVEL as a logging module constant."""
        return logging.getLevelName(self.LOG_LEVEL)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


settings = get_settings()
