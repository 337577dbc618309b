"""12-factor configuration adapter using environment variables and TOML config."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _require_positive(v: float) -> float:
    if v <= 0:
        raise ValueError("durations must be greater than 0")
    return v


def _require_max_polls(v: int | None) -> int | None:
    if v is not None and v < 1:
        raise ValueError("max_polls must be at least 1")
    return v


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_prefix="COMMAUTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reservauto API configuration
    api_base_url: str = Field(
        default="https://restapifrontoffice.reservauto.net",
        description="Scheme and host of the Reservauto API",
    )
    api_timeout_seconds: float = Field(
        default=10.0, description="Timeout for one availability request in seconds"
    )

    # Search loop configuration
    poll_interval_seconds: float = Field(
        default=1.5,
        description="Delay between two availability requests in seconds",
    )
    max_polls: int | None = Field(
        default=None,
        description="Give up after this many empty polls (unset polls until cancelled)",
    )

    # Default search location, used by the CLI when no flag is given
    city_id: int | None = Field(default=None, description="Default Communauto city id")
    latitude: float | None = Field(default=None, description="Default search latitude")
    longitude: float | None = Field(default=None, description="Default search longitude")
    margin_km: float = Field(default=1.0, description="Default search margin in kilometers")

    log_level: str = Field(default="INFO", description="Root log level")

    # TOML config file path, optional
    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file with [api] and [search] sections",
    )

    @field_validator("poll_interval_seconds", "api_timeout_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate durations are strictly positive."""
        return _require_positive(v)

    @field_validator("max_polls")
    @classmethod
    def validate_max_polls(cls, v: int | None) -> int | None:
        """Validate max_polls is at least 1 when set."""
        return _require_max_polls(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return v.upper()

    @classmethod
    def for_testing(cls, **overrides: Any) -> AppConfig:
        """Build a config that ignores any .env file."""
        return cls(_env_file=None, **overrides)

    def load_toml(self) -> dict[str, Any]:
        """Load config_file and apply its [api] and [search] sections.

        Returns the parsed TOML document, or an empty dict when no file is set.
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        api = toml_data.get("api", {})
        if not isinstance(api, dict):
            raise ValueError("TOML config 'api' must be a table")
        if "base_url" in api:
            self.api_base_url = str(api["base_url"])
        if "timeout_seconds" in api:
            self.api_timeout_seconds = _require_positive(float(api["timeout_seconds"]))
        if "poll_interval_seconds" in api:
            self.poll_interval_seconds = _require_positive(
                float(api["poll_interval_seconds"])
            )

        search = toml_data.get("search", {})
        if not isinstance(search, dict):
            raise ValueError("TOML config 'search' must be a table")
        if "city_id" in search:
            self.city_id = int(search["city_id"])
        if "latitude" in search:
            self.latitude = float(search["latitude"])
        if "longitude" in search:
            self.longitude = float(search["longitude"])
        if "margin_km" in search:
            self.margin_km = float(search["margin_km"])
        if "max_polls" in search:
            self.max_polls = _require_max_polls(int(search["max_polls"]))

        return toml_data

