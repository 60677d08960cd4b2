# -*- coding: utf-8 -*-
"""Unit tests for PersistenceManager snapshot and restore."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, Mock

from supply_tracker.events.trackers.tracker_events import TrackerStartedEvent
from supply_tracker.models.tracker import Tracker, TrackType
from supply_tracker.persistence.repositories.in_memory import InMemoryTrackerRepository
from supply_tracker.persistence.snapshot_store import InMemorySnapshotStore, encode_snapshot
from supply_tracker.services.access import SettingsRoleProvider
from supply_tracker.services.persistence import PersistenceManager
from supply_tracker.services.registry import TrackerRegistry


def _fresh_registry(settings: Any) -> TrackerRegistry:
    return TrackerRegistry(
        repository=InMemoryTrackerRepository(),
        role_provider=SettingsRoleProvider(settings),
        settings=settings,
    )


def _manager(
    registry: TrackerRegistry,
    store: Any,
    settings: Any,
    now: datetime,
    *,
    scheduler: Any = None,
    event_bus: Any = None,
) -> PersistenceManager:
    return PersistenceManager(
        registry=registry,
        scheduler=scheduler or SimpleNamespace(arm=Mock(return_value=True)),
        store=store,
        settings=settings,
        event_bus=event_bus,
        now=lambda: now,
    )


async def test_round_trip_preserves_decimals_exactly(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
    settings: Any,
    now_utc: datetime,
    D: Callable[[Any], Decimal],
) -> None:
    original = tracker_factory(
        initial_percentage="12.500000000000000000",
        threshold="0.10",
        total_supply="999999999.123456789",
        track_type=TrackType.TOP_HOLDERS,
    )
    original = original.with_observation(D("12.750000000000000001"), rebase=False)
    await registry.register(original)
    store = InMemorySnapshotStore()

    assert await _manager(registry, store, settings, now_utc).snapshot() is True

    target = _fresh_registry(settings)
    scheduler = SimpleNamespace(arm=Mock(return_value=True))
    restored = await _manager(target, store, settings, now_utc, scheduler=scheduler).restore()

    assert restored == [original]
    loaded = await target.get(original.owner, original.tracker_id)
    assert loaded == original
    assert loaded is not None
    assert str(loaded.baseline_percentage) == "12.500000000000000000"
    assert str(loaded.current_percentage) == "12.750000000000000001"
    assert str(loaded.total_supply) == "999999999.123456789"
    assert str(loaded.significant_change_threshold) == "0.10"
    assert loaded.created_at == original.created_at
    scheduler.arm.assert_called_once_with(original)


async def test_snapshot_document_is_versioned_json(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
    settings: Any,
    now_utc: datetime,
) -> None:
    await registry.register(tracker_factory())
    store = InMemorySnapshotStore()

    await _manager(registry, store, settings, now_utc).snapshot()
    document = json.loads(await store.read_snapshot())

    assert document["version"] == 1
    assert len(document["trackers"]) == 1
    record = document["trackers"][0]
    assert record["baseline_percentage"] == "10"
    assert record["track_type"] == "team"
    assert "created_at" in record


async def test_restore_skips_expired_trackers(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
    settings: Any,
    now_utc: datetime,
) -> None:
    fresh = tracker_factory(track_type=TrackType.TEAM, created_at=now_utc - timedelta(hours=47))
    stale = tracker_factory(track_type=TrackType.TOP_HOLDERS, created_at=now_utc - timedelta(hours=49))
    await registry.load([fresh, stale])
    store = InMemorySnapshotStore()
    await _manager(registry, store, settings, now_utc).snapshot()

    target = _fresh_registry(settings)
    scheduler = SimpleNamespace(arm=Mock(return_value=True))
    restored = await _manager(target, store, settings, now_utc, scheduler=scheduler).restore()

    assert restored == [fresh]
    assert await target.all_trackers() == [fresh]
    scheduler.arm.assert_called_once_with(fresh)


async def test_restore_without_snapshot_starts_empty(
    registry: TrackerRegistry,
    settings: Any,
    now_utc: datetime,
) -> None:
    restored = await _manager(registry, InMemorySnapshotStore(), settings, now_utc).restore()

    assert restored == []
    assert await registry.all_trackers() == []


async def test_restore_with_corrupt_snapshot_starts_empty(
    registry: TrackerRegistry,
    settings: Any,
    now_utc: datetime,
) -> None:
    store = InMemorySnapshotStore(b'{"version": 99, "trackers": "nope"}')

    restored = await _manager(registry, store, settings, now_utc).restore()

    assert restored == []
    assert await registry.all_trackers() == []


async def test_restore_with_zero_threshold_record_starts_empty(
    tracker_factory: Callable[..., Tracker],
    registry: TrackerRegistry,
    settings: Any,
    now_utc: datetime,
) -> None:
    data = encode_snapshot([tracker_factory()], now_utc).replace(
        b'"significant_change_threshold": "1"', b'"significant_change_threshold": "0"'
    )
    scheduler = SimpleNamespace(arm=Mock(return_value=True))

    restored = await _manager(
        registry, InMemorySnapshotStore(data), settings, now_utc, scheduler=scheduler
    ).restore()

    assert restored == []
    assert await registry.all_trackers() == []
    scheduler.arm.assert_not_called()


async def test_failed_write_is_reported_not_raised(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
    settings: Any,
    now_utc: datetime,
) -> None:
    await registry.register(tracker_factory())
    store = SimpleNamespace(write_snapshot=AsyncMock(side_effect=OSError("disk full")))

    assert await _manager(registry, store, settings, now_utc).snapshot() is False


async def test_tracker_events_mark_state_dirty(
    registry: TrackerRegistry,
    settings: Any,
    now_utc: datetime,
    event_bus: Any,
) -> None:
    manager = _manager(registry, InMemorySnapshotStore(), settings, now_utc, event_bus=event_bus)

    manager.start()
    manager.start()

    subscribed = [c.args[0] for c in event_bus.on.call_args_list]
    assert TrackerStartedEvent in subscribed
    assert len(subscribed) == 4
    handler = event_bus.on.call_args_list[0].args[1]
    assert manager._dirty.is_set() is False
    handler(TrackerStartedEvent(owner="alice", tracker_id="x_team", track_type="team"))
    assert manager._dirty.is_set() is True
