"""Configuration package."""

from fiscalforge.config.settings import (
    ALLOWED_HASH_ALGORITHMS,
    AppSettings,
    DatabaseSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "ALLOWED_HASH_ALGORITHMS",
    "AppSettings",
    "DatabaseSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
