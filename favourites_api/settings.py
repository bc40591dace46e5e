"""Centralized configuration management for the favourites API."""

from __future__ import annotations

import logging
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env before the settings singleton below reads the environment.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PORT = 8080
DEFAULT_RATE_LIMIT_MS = 50
DEFAULT_MAX_BODY_BYTES = 1 << 20
DEFAULT_PAGE_LIMIT = 100
MAX_PAGE_LIMIT = 1000
DOCS_ORIGIN = "http://localhost:8081"


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Every field reads an upper-case environment variable (see the aliases) and
    may also be passed by field name, which is what the tests do.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    app_env: str = Field(
        default="development",
        alias="APP_ENV",
        description="Deployment environment name (development, production).",
    )
    host: str = Field(default="0.0.0.0", alias="APP_HOST")
    port: int = Field(default=DEFAULT_PORT, alias="APP_PORT")
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    http_log_enabled: bool = Field(
        default=True,
        alias="ENABLE_HTTP_LOG",
        description="Emit one access log line per HTTP request.",
    )
    rate_limit_ms: int = Field(
        default=DEFAULT_RATE_LIMIT_MS,
        ge=0,
        alias="RATE_LIMIT_MS",
        description=(
            "Minimum interval in milliseconds between requests from the same"
            " user (or client address). Zero disables throttling."
        ),
    )
    max_body_bytes: int = Field(
        default=DEFAULT_MAX_BODY_BYTES,
        gt=0,
        alias="MAX_BODY_BYTES",
        description="Largest request body accepted, in bytes.",
    )
    api_key: str = Field(
        default="",
        alias="API_KEY",
        description="Shared secret expected in X-API-Key. Empty disables auth.",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of additional CORS origins.",
    )
    default_page_limit: int = Field(default=DEFAULT_PAGE_LIMIT, gt=0, alias="DEFAULT_PAGE_LIMIT")
    max_page_limit: int = Field(default=MAX_PAGE_LIMIT, gt=0, alias="MAX_PAGE_LIMIT")

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return the docs origin followed by any configured extra origins."""

        origins = [DOCS_ORIGIN]
        if self.cors_allow_origins_raw:
            for origin in self.cors_allow_origins_raw.split(","):
                normalized = _normalize_origin(origin)
                if normalized and normalized not in origins:
                    origins.append(normalized)
        return origins

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key.strip())

    @property
    def rate_limit_seconds(self) -> float:
        return self.rate_limit_ms / 1000

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self.auth_enabled:
            warnings.append(
                "API_KEY is not set - requests are accepted without authentication"
            )

        if not self.cors_allow_origins_raw:
            warnings.append(
                f"CORS_ALLOW_ORIGINS is not set - only {DOCS_ORIGIN} may call the API "
                "from a browser"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MAX_BODY_BYTES",
    "DEFAULT_PAGE_LIMIT",
    "DEFAULT_PORT",
    "DEFAULT_RATE_LIMIT_MS",
    "DOCS_ORIGIN",
    "MAX_PAGE_LIMIT",
    "get_settings",
]
