# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: the Companies
House connector, the fetch cache, the modern slavery registry, the risk flag
engine and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === COMPANIES HOUSE ===
    companies_house_api_key: str = ""
    companies_house_api_base: str = "https://api.company-information.service.gov.uk"
    companies_house_web_base: str = (
        "https://find-and-update.company-information.service.gov.uk"
    )
    http_timeout_seconds: float = 10.0

    # === Fetch cache ===
    cache_backend: Literal["sqlite", "json", "redis"] = "sqlite"
    cache_db_path: str = ":memory:"
    cache_root: Path = Path("~/.suppliercheck/cache")
    cache_redis_url: str = ""
    cache_sweep_interval_seconds: int = 0

    # TTLs per request kind (seconds)
    cache_ttl_search: int = 300
    cache_ttl_profile: int = 3600
    cache_ttl_officers: int = 3600
    cache_ttl_pscs: int = 3600
    cache_ttl_registry: int = 3600

    # === Modern slavery registry ===
    registry_url_pattern: str = (
        "https://modern-slavery-statement-registry.service.gov.uk"
        "/statements/{year}.csv"
    )
    registry_years: str = "2024,2023,2022,2021,2020"
    registry_column_company_number: str = "Company number"
    registry_column_company_name: str = "Organisation name"
    registry_column_year: str = "Statement year"
    registry_column_signed_date: str = "Date signed"
    registry_column_statement_url: str = "Statement URL"

    # === Risk flags ===
    officer_changes_lookback_months: int = 12
    officer_changes_threshold: int = 3

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "cache_ttl_search",
        "cache_ttl_profile",
        "cache_ttl_officers",
        "cache_ttl_pscs",
        "cache_ttl_registry",
        "cache_sweep_interval_seconds",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:  # noqa: N805
        """TTLs and the sweep interval must be non-negative."""
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("officer_changes_lookback_months", "officer_changes_threshold")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        """Lookback window and change threshold must be at least 1."""
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_BACKEND=redis requires CACHE_REDIS_URL")

        if not self.registry_years_list:
            errors.append("REGISTRY_YEARS must list at least one year")

        if "{year}" not in self.registry_url_pattern:
            errors.append("REGISTRY_URL_PATTERN must contain a {year} placeholder")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def registry_years_list(self) -> list[int]:
        """Parse comma-separated registry years, newest first."""
        years: list[int] = []
        for part in self.registry_years.split(","):
            part = part.strip()
            if part.isdigit():
                years.append(int(part))
        return sorted(set(years), reverse=True)


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-request config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
