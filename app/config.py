"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]

_TRUE_VALUES = {"1", "true", "yes", "on"}

_ALLOWED_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in _TRUE_VALUES


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class LoggingSettings:
    """
    Process-wide logging settings.
    """

    level: str = "INFO"

    @property
    def level_number(self) -> int:
        return getattr(logging, self.level, logging.INFO)


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for external connectors.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class WorldBankSettings:
    """
    World Bank WDI connector settings.
    """

    base_url: str = "https://api.worldbank.org/v2"
    per_page: int = 20000
    user_agent: str = "connectivity-compare/1.0"
    speed_proxy_enabled: bool = True


@dataclass(frozen=True)
class UploadIngestionSettings:
    """
    Runtime settings for uploaded CSV/JSON files.
    """

    max_bytes: int = 5 * 1024 * 1024
    max_validation_errors: int = 500
    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """
    Return logging settings from environment variables.
    """

    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("EXTERNAL_HTTP_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_world_bank_settings() -> WorldBankSettings:
    """
    Return World Bank connector settings from environment variables.
    """

    return WorldBankSettings(
        base_url=_get_str_env("WORLD_BANK_BASE_URL", "https://api.worldbank.org/v2"),
        per_page=max(1, _get_int_env("WORLD_BANK_PER_PAGE", 20000)),
        user_agent=_get_str_env("WORLD_BANK_USER_AGENT", "connectivity-compare/1.0"),
        speed_proxy_enabled=_get_bool_env("WORLD_BANK_SPEED_PROXY_ENABLED", True),
    )


@lru_cache(maxsize=1)
def get_upload_ingestion_settings() -> UploadIngestionSettings:
    """
    Return cached upload ingestion settings from environment variables.
    """

    return UploadIngestionSettings(
        max_bytes=max(1, _get_int_env("UPLOAD_MAX_BYTES", 5 * 1024 * 1024)),
        max_validation_errors=max(1, _get_int_env("UPLOAD_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("UPLOAD_LOG_VALIDATION_ERRORS", True),
    )


def collect_settings_errors() -> list[str]:
    """
    Return every invalid setting so startup can report them in one pass.
    """

    errors: list[str] = []

    base_url = get_world_bank_settings().base_url
    if not base_url.lower().startswith(("http://", "https://")):
        errors.append(
            f"WORLD_BANK_BASE_URL='{base_url}' is not valid. It must start with http:// or https://."
        )

    log_level = get_logging_settings().level
    if log_level not in _ALLOWED_LOG_LEVELS:
        errors.append(
            f"LOG_LEVEL='{log_level}' is not valid. Allowed values: {sorted(_ALLOWED_LOG_LEVELS)}."
        )

    return errors
