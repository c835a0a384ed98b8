from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Payroll Calendar"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    database_url: str = "postgresql+asyncpg://payroll_calendar:payroll_calendar@db:5432/payroll_calendar"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    database_pool_recycle_seconds: int = 3600
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    holiday_feed_url: str = "https://api-harilibur.vercel.app/api"
    holiday_feed_timeout_seconds: float = 10.0
    default_payroll_cutoff_day: int = 20
    default_rest_days: list[int] = [5, 6]  # date.weekday(): Saturday, Sunday
    sync_interval_seconds: int = 86400


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
