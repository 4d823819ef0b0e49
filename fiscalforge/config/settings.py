"""
Configuration Management for FiscalForge

Settings come from environment variables or a .env file, parsed and
validated by pydantic-settings. Database settings use the FISCALFORGE_DB_
prefix; application settings are unprefixed.

DESIGN DECISION: Nothing else in the package reads the environment.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Digests at least as strong as SHA-256
ALLOWED_HASH_ALGORITHMS = (
    "sha256",
    "sha384",
    "sha512",
    "sha3_256",
    "sha3_384",
    "sha3_512",
    "blake2b",
)


class DatabaseSettings(BaseSettings):
    """Relational store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FISCALFORGE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="sqlite:///fiscalforge.db",
        description="SQLAlchemy database URL (sqlite, mysql+pymysql, postgresql)"
    )
    echo: bool = Field(
        default=False,
        description="Echo emitted SQL to the log"
    )
    pool_pre_ping: bool = Field(
        default=True,
        description="Test pooled connections before handing them out"
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class AppSettings(BaseSettings):
    """
    Behaviour of the tracker itself: logging, hashing, read policy,
    display and validation thresholds.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Credentials
    password_hash_algorithm: str = Field(
        default="sha256",
        description="hashlib algorithm used for password digests"
    )

    # Reads
    recent_transactions_limit: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Rows shown in the recent transactions list"
    )
    trend_months: int = Field(
        default=12,
        ge=1,
        le=120,
        description="Number of most recent months in the expense trend"
    )
    lenient_reads: bool = Field(
        default=False,
        description="Return empty results instead of raising when a read fails"
    )

    # Display
    currency_symbol: str = Field(
        default="£",
        description="Symbol shown next to amounts"
    )
    default_categories: str = Field(
        default="Food,Transport,Entertainment,Bills,Shopping,Salary,Other",
        description="Comma-separated category suggestions for the entry form"
    )

    # Validation thresholds
    max_transaction_amount: Decimal = Field(
        default=Decimal("99999999.99"),
        gt=0,
        description="Largest amount that fits a NUMERIC(10, 2) column"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be before warning"
    )

    @field_validator('password_hash_algorithm')
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Only accept digests of SHA-256 strength or better."""
        normalized = v.strip().lower()
        if normalized.startswith("sha3"):
            normalized = normalized.replace("-", "_")
        else:
            normalized = normalized.replace("-", "")
        if normalized not in ALLOWED_HASH_ALGORITHMS:
            raise ValueError(
                f"Unsupported password hash algorithm: {v}. "
                f"Allowed: {', '.join(ALLOWED_HASH_ALGORITHMS)}"
            )
        return normalized

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def default_categories_list(self) -> list[str]:
        """Get category suggestions as a list."""
        return [
            category.strip()
            for category in self.default_categories.split(",")
            if category.strip()
        ]


class Settings(BaseSettings):
    """Entry point that hands out the per-concern settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide settings, built on first call.

    Tests that change the environment call get_settings.cache_clear().
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to load each settings group.

    Returns {group: ok} plus a "<group>_error" message for each group
    that failed, so a launcher can report every problem at once.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.database
        results["database"] = True
    except Exception as e:
        results["database"] = False
        results["database_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
