"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All connection strings come from environment variables or .env
    - get_settings() is cached (lru_cache): single instance per process
    - Circulation policy numbers (loan days, fine rate, hold days) are settings, not constants

Design Decisions:
    - Defaults provided for every setting: works out-of-the-box with docker-compose
    - Money settings are Decimal so fine arithmetic never touches float
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://library:library@db:5432/library"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # API
    cors_origins: list[str] = ["http://localhost:5173"]
    default_page_size: int = 10
    max_page_size: int = 100

    # Circulation policy
    default_loan_days: int = 14
    max_renewals: int = 2
    daily_fine_rate: Decimal = Decimal("0.25")
    max_overdue_fine: Decimal = Decimal("20.00")
    fine_due_days: int = 30
    reservation_hold_days: int = 7
    alert_due_soon_days: int = 3
    membership_expiry_warning_days: int = 30

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
