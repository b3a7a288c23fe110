"""
Configuration Management for Ledgerbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every file the program touches (journal, trial report, ledger reports,
audit log) is named in one place, and command-line flags only ever
override these values.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Locations of the journal store and the generated reports."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGERBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    journal_path: str = Field(
        default="journal.txt",
        description="Fixed-width journal store"
    )
    trial_path: str = Field(
        default="Trial.txt",
        description="Trial balance report (opened in append mode)"
    )
    reports_dir: str = Field(
        default=".",
        description="Directory where <account>.txt ledger reports are written"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding for every store and report"
    )

    @field_validator('journal_path', 'trial_path')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """A file path can't be empty."""
        if not v.strip():
            raise ValueError("Path must not be empty")
        return v

    def ledger_path(self, account_name: str) -> Path:
        """Path of the ledger report for one account."""
        return Path(self.reports_dir) / f"{account_name}.txt"


class SessionSettings(BaseSettings):
    """Interactive session limits."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGERBOOK_SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # None means no cap on the number of ledger accounts per run
    max_ledger_accounts: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum ledger accounts built in one run"
    )


class LoggingSettings(BaseSettings):
    """Structured logging and audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGERBOOK_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="WARNING",
        description="Log level for the local structured log"
    )
    file: Optional[str] = Field(
        default=None,
        description="Write the structured log here instead of stderr"
    )
    audit_path: Optional[str] = Field(
        default=None,
        description="Append audit events as JSON lines to this file"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept level names the logging module knows."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def session(self) -> SessionSettings:
        return SessionSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings sections.

    Returns a dict of {section_name: is_valid}, plus
    {section_name}_error entries for the sections that failed.
    """
    results = {}

    settings = get_settings()

    for section in ("storage", "session", "logging"):
        try:
            getattr(settings, section)
            results[section] = True
        except Exception as e:
            results[section] = False
            results[f"{section}_error"] = str(e)

    return results
