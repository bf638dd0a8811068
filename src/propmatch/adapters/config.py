# src/propmatch/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence
    DB_URI: str = Field(default="sqlite:///propmatch.db")

    # -----------------------------
    # Preference store
    # -----------------------------
    PREFERENCES_PATH: str = Field(default=".propmatch/preferences.json")
    PREFERENCES_KEY: str = Field(default="propertyPreferences")

    # -----------------------------
    # Search defaults
    # -----------------------------
    DEFAULT_SORT: str = Field(default="match")
    SEARCH_DEFAULT_LIMIT: int = Field(default=200)

    model_config = SettingsConfigDict(
        env_prefix="PROPMATCH_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("DEFAULT_SORT", mode="before")
    @classmethod
    def _known_sort(cls, v: Any) -> Any:
        s = str(v or "match").strip().lower()
        if s not in {"match", "price-low", "price-high", "name"}:
            raise ValueError("DEFAULT_SORT must be one of match|price-low|price-high|name")
        return s

    @field_validator("SEARCH_DEFAULT_LIMIT", mode="before")
    @classmethod
    def _limit_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("SEARCH_DEFAULT_LIMIT must be > 0")
        return n


config = AppConfig()
