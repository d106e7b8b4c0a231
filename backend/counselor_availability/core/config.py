# backend/counselor_availability/core/config.py
import logging
import os
from pathlib import Path
from typing import Any, Literal, Set

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


NON_PROD_SITE_MODES: Set[str] = {
    "local",
    "dev",
    "development",
    "int",
    "stg",
    "stage",
    "staging",
    "preview",
}
PROD_SITE_MODES: Set[str] = {"prod", "production", "beta", "live"}


def _classify_site_mode(raw_site_mode: str | None) -> tuple[str, bool, bool]:
    """Return normalized site mode with production/non-prod classification."""

    normalized = (raw_site_mode or "").strip().lower()
    is_prod = normalized in PROD_SITE_MODES
    is_non_prod = normalized in NON_PROD_SITE_MODES
    return normalized, is_prod, is_non_prod


class Settings(BaseSettings):
    # Database
    database_url: str = Field(
        default="sqlite:///./counselor_availability.db",
        description="SQLAlchemy URL for the availability store",
    )
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=5, ge=0)
    # Fail fast when the pool is exhausted; callers get a retryable error
    db_pool_timeout: int = Field(default=5, ge=1)
    db_pool_recycle: int = Field(default=300, ge=1)
    db_statement_timeout_ms: int = Field(
        default=15000,
        ge=0,
        description="Postgres statement_timeout applied to every pooled connection",
    )

    # Weekly template defaults
    default_slot_duration_minutes: int = Field(
        default=45,
        gt=0,
        description="Slot length used when a day entry omits slotDuration",
    )
    default_buffer_time_minutes: int = Field(
        default=0,
        ge=0,
        description="Gap between consecutive slots when a day entry omits bufferTime",
    )
    default_session_price: float = Field(
        default=3000.0,
        ge=0,
        description="Price stored on a day record when the entry omits price",
    )

    # Concurrency
    availability_lock_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="How long a mutation waits for the per-counselor lock",
    )

    # Slot expansion
    max_slot_range_days: int = Field(default=62, ge=1)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    site_mode: str = Field(default="local")

    # Legacy flags for backward compatibility
    is_testing: bool = False  # Set to True when running tests

    # Environment (derived from SITE_MODE)
    environment: str = (
        "production" if _classify_site_mode(os.getenv("SITE_MODE", "local"))[1] else "development"
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def get_database_url(self) -> str:
        """Return the database URL, refusing SQLite outside local/test runs."""
        url = self.database_url
        if self.environment == "production" and url.startswith("sqlite"):
            raise RuntimeError("Refusing to start: production requires a Postgres DATABASE_URL")
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
