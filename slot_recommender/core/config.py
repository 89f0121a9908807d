# slot_recommender/core/config.py
from functools import lru_cache

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings drive:
    - DB connection
    - Logging output
    - Slot generation tunables (business hours, horizon, grid step)
    - The calendar availability provider and its Graph credentials
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Slot Recommender"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./slot_recommender.db",
        description="SQLAlchemy-compatible database URL",
    )

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", description="Root log level for the service.")
    LOG_JSON: bool = Field(
        default=False,
        description="Emit JSON log lines (python-json-logger) instead of plain text.",
    )

    # --- Slot generation / ranking ---
    SCHEDULER_TIMEZONE: str = Field(
        "UTC",
        description=(
            "Timezone used as the server's notion of 'now' when building the "
            "business-hours grid. No per-participant conversion is applied."
        ),
    )
    BUSINESS_HOURS_START: int = Field(8, ge=0, le=23)
    BUSINESS_HOURS_END: int = Field(18, ge=1, le=24)
    SLOT_INTERVAL_MINUTES: int = Field(30, ge=5, le=120)
    SCHEDULING_HORIZON_DAYS: int = Field(7, ge=1, le=31)
    MAX_SUGGESTED_SLOTS: int = Field(5, ge=1, le=20)
    MIN_SLOT_SCORE: int = Field(
        20,
        ge=0,
        le=100,
        description="Slots scoring at or below this value are discarded before ranking.",
    )

    # --- Calendar availability provider ---
    CALENDAR_PROVIDER: str = Field(
        "none",
        description=(
            "Source of registered users' busy/free data: 'none' (not yet wired, "
            "always empty) or 'graph' (Microsoft Graph getSchedule)."
        ),
    )
    GRAPH_TENANT_ID: str | None = None
    GRAPH_CLIENT_ID: str | None = None
    GRAPH_CLIENT_SECRET: str | None = None
    GRAPH_BASE_URL: AnyHttpUrl | None = None


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
