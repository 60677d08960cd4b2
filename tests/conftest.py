# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import Any
from unittest.mock import Mock

import pytest

from supply_tracker.models.tracker import Tracker, TrackType
from supply_tracker.persistence.repositories.in_memory.tracker_repository import (
    InMemoryTrackerRepository,
)
from supply_tracker.services.access import SettingsRoleProvider
from supply_tracker.services.registry import TrackerRegistry

_TRACKER_DEFAULTS: dict[str, Any] = {
    "poll_seconds": 60.0,
    "snapshot_seconds": 30.0,
    "sweep_seconds": 3600.0,
    "ttl_hours": 48.0,
    "retry_max_retries": 5,
    "retry_initial_delay_seconds": 1.0,
    "call_timeout_seconds": 20.0,
    "snapshot_path": "data/trackers.json",
    "vip_quota": 10,
    "default_quota": 2,
    "min_threshold": 0.1,
    "max_threshold": 100.0,
    "failure_notify_after": 5,
}


@pytest.fixture
def token() -> str:
    """Default token mint used by tests."""
    return "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"


@pytest.fixture
def wallets() -> list[str]:
    """Default wallet cohort used by tests."""
    return [
        "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM",
        "HN7cABqLq46Es1jh92dQQisAq662SmxELLLsHHe4YWrH",
    ]


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def D() -> Callable[[Any], Decimal]:
    """Decimal helper: D('1.23') -> Decimal('1.23')."""
    return lambda value: Decimal(str(value))


@pytest.fixture
def settings_factory() -> Callable[..., Any]:
    """Build a settings stand-in; keyword overrides apply to settings.tracker."""

    def _build(**tracker_overrides: Any) -> Any:
        return SimpleNamespace(
            tracker=SimpleNamespace(**{**_TRACKER_DEFAULTS, **tracker_overrides}),
            access=SimpleNamespace(admin_users=["boss"], vip_users=["@VipUser"]),
            api=SimpleNamespace(solana_rpc_url="https://rpc.example.com/", timeout_seconds=5.0),
        )

    return _build


@pytest.fixture
def settings(settings_factory: Callable[..., Any]) -> Any:
    """Settings stand-in with default tracker configuration."""
    return settings_factory()


@pytest.fixture
def tracker_factory(
    token: str,
    wallets: list[str],
    now_utc: datetime,
    D: Callable[[Any], Decimal],
) -> Callable[..., Tracker]:
    """Build Tracker with sensible defaults and easy overrides."""

    def _build(**overrides: Any) -> Tracker:
        return Tracker.create(
            owner=overrides.pop("owner", "alice"),
            destination=overrides.pop("destination", "-100123"),
            token_address=overrides.pop("token_address", token),
            wallets=overrides.pop("wallets", wallets),
            track_type=overrides.pop("track_type", TrackType.TEAM),
            total_supply=overrides.pop("total_supply", D("1000000000")),
            decimals=overrides.pop("decimals", 6),
            ticker=overrides.pop("ticker", "TKN"),
            initial_percentage=overrides.pop("initial_percentage", D("10")),
            threshold=overrides.pop("threshold", D("1")),
            created_at=overrides.pop("created_at", now_utc),
        )

    return _build


@pytest.fixture
def tracker_repo() -> InMemoryTrackerRepository:
    """Fresh in-memory tracker repository per test."""
    return InMemoryTrackerRepository()


@pytest.fixture
def registry(tracker_repo: InMemoryTrackerRepository, settings: Any) -> TrackerRegistry:
    """Registry over the in-memory repository with settings-backed roles."""
    return TrackerRegistry(
        repository=tracker_repo,
        role_provider=SettingsRoleProvider(settings),
        settings=settings,
    )


@pytest.fixture
def notification_service() -> Any:
    """Notification sink that records messages instead of delivering them."""
    return SimpleNamespace(notify=Mock(return_value=True))


@pytest.fixture
def event_bus() -> Any:
    """Event bus stand-in recording dispatch() and on() calls."""
    return SimpleNamespace(dispatch=Mock(), on=Mock(), handlers={})
