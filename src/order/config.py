"""
Configuration Management - Environment-based settings.

Provides centralized configuration with environment variable support
and sensible defaults for the order CLI.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrderSettings(BaseSettings):
    """Environment-based configuration for order.

    All settings can be overridden via environment variables
    with ORDER_ prefix.

    Example:
        >>> export ORDER_DEFAULT_CITY="New York"
        >>> export ORDER_PONG_WIN_SCORE=3
        >>> settings = get_settings()
        >>> print(settings.default_city)  # "New York"
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Weather
    default_city: str = Field(
        default="Los Angeles",
        description="City used when 'order weather' gets no argument",
    )

    weather_url: str = Field(
        default="https://wttr.in",
        description="Base URL of the wttr.in compatible weather service",
    )

    http_timeout: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="HTTP timeout in seconds",
    )

    # Ping
    default_host: str = Field(
        default="google.com",
        description="Host used when 'order ping' gets no argument",
    )

    ping_timeout: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="Seconds to wait for the ping binary",
    )

    # Random
    random_min: int = Field(default=1, description="Default lower bound for 'order random'")
    random_max: int = Field(default=100, description="Default upper bound for 'order random'")

    # Pong
    pong_width: int = Field(
        default=40,
        ge=10,
        le=200,
        description="Arena width in character cells",
    )

    pong_height: int = Field(
        default=15,
        ge=5,
        le=100,
        description="Arena height in character cells",
    )

    pong_win_score: int = Field(
        default=5,
        ge=1,
        le=99,
        description="Points needed to win a game",
    )

    # Usage counter
    data_dir: str | None = Field(
        default=None,
        description="Directory for the usage counter file (~/.order if not set)",
    )

    track_usage: bool = Field(
        default=True,
        description="Count command invocations in the usage file",
    )

    # Observability
    log_level: str = Field(
        default="WARNING",
        description="Logging level",
    )

    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log output format",
    )

    @property
    def data_path(self) -> Path:
        """Get data directory as Path."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return Path.home() / ".order"

    @property
    def usage_file(self) -> Path:
        """Path of the persisted usage counter file."""
        return self.data_path / "usage.json"


@lru_cache
def get_settings() -> OrderSettings:
    """Get cached settings instance.

    Returns:
        OrderSettings instance (cached)
    """
    return OrderSettings()


def configure_logging(settings: OrderSettings | None = None, verbose: bool = False) -> None:
    """Configure structlog based on settings.

    Logs go to stderr so command output on stdout stays clean.

    Args:
        settings: Settings to use (uses global settings if None)
        verbose: Force DEBUG level regardless of settings
    """
    import logging

    import structlog

    settings = settings or get_settings()

    level_name = "DEBUG" if verbose else settings.log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    if settings.log_format == "json":
        processors = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
