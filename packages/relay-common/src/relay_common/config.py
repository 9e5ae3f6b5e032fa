"""
Environment-based configuration management for the AppNeta relay.

Uses pydantic-settings to load configuration values from environment
variables and .env files.

All environment variables are prefixed with ``RELAY_`` to avoid collisions.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from ``RELAY_``-prefixed environment variables.

    Attributes:
        persistence_time: Suppression window in seconds.  A repeated
            fingerprint seen within this window is not relayed again.
        store_backend: Which TTL store to use (``redis`` or ``memory``).
        redis_url: Redis connection URL for the TTL store.
        atomic_dedup: Use an atomic insert-if-absent for the general
            dedup rule instead of separate exists/record calls.
        slack_webhook_url: Slack incoming-webhook URL messages are posted to.
        slack_max_attempts: Delivery attempts before giving up.
        environment: Deployment environment.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        api_host: Bind address for the webhook server.
        api_port: Bind port for the webhook server.
    """

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Deduplication ──
    persistence_time: int = Field(
        default=300,
        ge=1,
        description="Suppression window in seconds.",
    )
    store_backend: Literal["redis", "memory"] = Field(
        default="redis",
        description="TTL store backend.",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL.",
    )
    atomic_dedup: bool = Field(
        default=True,
        description="Use atomic insert-if-absent for the general dedup rule.",
    )

    # ── Slack ──
    slack_webhook_url: str = Field(default="", description="Slack incoming-webhook URL.")
    slack_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Delivery attempts before giving up.",
    )

    # ── Runtime ──
    environment: Literal["production", "development"] = Field(
        default="production",
        description="Deployment environment.",
    )
    log_level: str = Field(default="INFO", description="Logging level.")
    api_host: str = Field(default="0.0.0.0", description="Webhook server bind address.")
    api_port: int = Field(default=8080, ge=1, le=65535, description="Webhook server bind port.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
