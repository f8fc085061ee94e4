"""Core configuration.

Why here:
- Centralises environment variables (pydantic-settings) away from the CLI.
- Adapters (HTTP client, reporter) read the same settings object.

CLI flags take precedence over anything loaded here.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "jcurl"
APP_VERSION = "0.1.0"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars, .env files).
    - One configuration contract shared by CLI and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="JCURL_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first, then the per-user one.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout (seconds). Unset keeps the transport default.",
    )
    user_agent: str = Field(
        default=f"{APP_NAME}/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    follow_redirects: bool = Field(
        default=True,
        description="Follow 3xx responses before decoding the body.",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        le=10_000,
        description="Ceiling on in-flight requests. Unset means unbounded.",
    )
    pretty_output: bool = Field(
        default=True,
        description="Indent JSON written to stdout.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level for diagnostics on stderr.",
    )

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"unknown log level {value!r}")
        return level
