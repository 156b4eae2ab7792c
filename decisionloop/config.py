"""
Decision Loop Configuration.

Pydantic Settings v2 — loads from .env, environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────────────
    app_name: str = "Decision Loop"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = Field(
        default="sqlite+aiosqlite:///./decisionloop.db",
        alias="DATABASE_URL",
    )
    db_pool_recycle: int = Field(default=3600, alias="DB_POOL_RECYCLE")

    # ── Analytics windows ────────────────────────────────────────────────
    growth_window_days: int = Field(default=14, alias="GROWTH_WINDOW_DAYS")
    health_trend_lookback_days: int = Field(default=7, alias="HEALTH_TREND_LOOKBACK_DAYS")
    trend_threshold: float = Field(default=2.0, alias="TREND_THRESHOLD")
    streak_target_days: int = Field(default=30, alias="STREAK_TARGET_DAYS")
    min_outcomes_for_trajectory: int = Field(default=5, alias="MIN_OUTCOMES_FOR_TRAJECTORY")

    # ── Operational ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses an async driver."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("sqlite://"):
            url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return url


settings = Settings()
