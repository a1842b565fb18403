"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Loan policy numbers live here and reach the engine only through loan_policy()

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: works out-of-the-box with docker-compose
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from circulation.core.loan_policy import LoanPolicy


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
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Loan policy
    daily_fine_rate: Decimal = Field(Decimal("5.00"), ge=0)
    max_active_borrows: int = Field(5, ge=1)
    default_loan_period_days: int = Field(14, ge=1)
    currency_symbol: str = "₹"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def loan_policy(self) -> LoanPolicy:
        return LoanPolicy(
            daily_fine_rate=self.daily_fine_rate,
            max_active_borrows=self.max_active_borrows,
            loan_period_days=self.default_loan_period_days,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
