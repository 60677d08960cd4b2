# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, TRACKER__POLL_SECONDS.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(raw: str) -> list[str]:
    if not raw or not raw.strip():
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "supply-tracker"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/supply_tracker.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """Configuration for the Solana JSON-RPC endpoint used for balance lookups."""

    model_config = SettingsConfigDict(extra="ignore")

    solana_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com",
        description="Solana JSON-RPC URL (Helius or any compatible provider).",
    )
    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )


class TrackerSettings(BaseSettings):
    """Scheduling, retry, persistence and quota configuration for supply trackers."""

    model_config = SettingsConfigDict(extra="ignore")

    poll_seconds: float = Field(
        default=60.0,
        ge=0.01,
        le=3600.0,
        description="Interval between two balance polls of the same tracker.",
    )
    snapshot_seconds: float = Field(
        default=30.0,
        ge=0.01,
        le=3600.0,
        description="Interval between two periodic snapshots of all trackers.",
    )
    sweep_seconds: float = Field(
        default=3600.0,
        ge=0.01,
        le=86400.0,
        description="Interval between two expiry sweeps.",
    )
    ttl_hours: float = Field(
        default=48.0,
        gt=0.0,
        description="Tracker lifetime; older trackers are expired by the sweeper.",
    )
    retry_max_retries: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Attempts per external balance lookup (including the first one).",
    )
    retry_initial_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Backoff base; attempt n waits initial_delay * 2**n.",
    )
    call_timeout_seconds: float = Field(
        default=20.0,
        gt=0.0,
        le=300.0,
        description="Upper bound for any single external call (lookup, delivery, storage).",
    )
    snapshot_path: str = Field(
        default="data/trackers.json",
        description="File where tracker state is persisted.",
    )
    vip_quota: int = Field(default=10, ge=0)
    default_quota: int = Field(default=2, ge=0)
    min_threshold: float = Field(default=0.1, gt=0.0)
    max_threshold: float = Field(default=100.0, gt=0.0)
    failure_notify_after: int = Field(
        default=5,
        ge=0,
        description="Consecutive failed ticks before the owner is told once; 0 disables.",
    )


class AccessSettings(BaseSettings):
    """Role membership (from env ACCESS__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    # Raw strings so pydantic-settings does not try to JSON-decode them.
    admin_users_raw: str = Field(default="", validation_alias="admin_users")
    vip_users_raw: str = Field(default="", validation_alias="vip_users")

    @computed_field
    @property
    def admin_users(self) -> list[str]:
        """Parse comma-separated admin_users_raw."""
        return _split_csv(self.admin_users_raw)

    @computed_field
    @property
    def vip_users(self) -> list[str]:
        """Parse comma-separated vip_users_raw."""
        return _split_csv(self.vip_users_raw)


class TelegramNotificationSettings(BaseSettings):
    """Telegram notifications (from env TELEGRAM__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    api_key: Optional[str] = Field(default=None, description="Telegram bot API key.")
    chat_id: Optional[str] = Field(
        default=None,
        description="Fallback chat ID for messages without a destination.",
    )
    messages_per_minute: int = Field(default=30, ge=1, le=120)
    max_retries: int = Field(default=5, ge=0, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class ConsoleNotificationSettings(BaseSettings):
    """Console notification settings."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, TRACKER__TTL_HOURS.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    tracker: TrackerSettings = Field(default_factory=TrackerSettings)
    access: AccessSettings = Field(default_factory=AccessSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.
        from_env(tracker={"poll_seconds": 5}).
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from supply_tracker.config import get_settings

        settings = get_settings()
        poll_seconds = settings.tracker.poll_seconds
    """
    return Settings()
