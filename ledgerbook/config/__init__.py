"""Configuration package."""

from ledgerbook.config.settings import (
    LoggingSettings,
    SessionSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "LoggingSettings",
    "SessionSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
