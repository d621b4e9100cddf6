"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field(
        "json",
        description="Log format: 'json' (structured) or 'plain'",
    )
    output: str = Field(
        "stdout",
        description="Log destination: 'stdout' or 'file'",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file' (default logs/app.log)",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated log files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read/propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    api_key_required: bool = Field(
        True,
        description="Whether admin endpoints require an X-API-Key header",
    )
    api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid admin API keys",
    )
    agent_id_prefix: str = Field(
        "littleships:agent:",
        description="Required prefix for agent identifiers sent by clients",
    )
    min_agent_id_chars: int = Field(3, ge=1)
    max_agent_id_chars: int = Field(100, ge=1)
    max_emoji_chars: int = Field(
        10,
        description="Maximum length of the reaction slug/emoji in a request body",
        ge=1,
    )
    baseline_seed_file: str | None = Field(
        None,
        description=(
            "Optional JSON file with persisted baseline counts: "
            '{"high_fives": {"<id>": n}, "acknowledgements": {"<id>": n}}'
        ),
    )
    purge_interval_seconds: int = Field(
        300,
        description="Interval between sweeps of expired rate limit buckets (0 disables)",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Fixed-window limits per limit class.

    All classes share one window; each class has its own maximum.
    """

    enabled: bool = Field(True, description="Enable request rate limiting")
    window_seconds: int = Field(
        3600,
        description="Window size in seconds shared by all limit classes",
        ge=1,
    )
    register_max: int = Field(10, ge=1)
    proof_max: int = Field(60, ge=1)
    high_five_max: int = Field(100, ge=1)
    acknowledgement_max: int = Field(100, ge=1)
    general_max: int = Field(1000, ge=1)
    include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* headers alongside Retry-After when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
    )


class LedgerSettings(BaseSettings):
    """Reaction ledger quotas."""

    max_per_agent_per_day: int = Field(
        20,
        description="Successful reactions one agent may record per UTC day",
        ge=1,
    )
    recent_capacity: int = Field(
        500,
        description="How many acknowledgement records are kept for the recent feed",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=LogSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Nested settings are created via default_factory so env loading works.
settings = Settings()
