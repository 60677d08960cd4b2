# -*- coding: utf-8 -*-
"""Unit tests for InMemoryTrackerRepository."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from supply_tracker.models.tracker import Tracker, TrackType
from supply_tracker.persistence.repositories.in_memory import InMemoryTrackerRepository


async def test_save_and_get_roundtrip(
    tracker_repo: InMemoryTrackerRepository,
    tracker_factory: Callable[..., Tracker],
) -> None:
    tracker = tracker_factory()

    await tracker_repo.save(tracker)

    assert await tracker_repo.get(tracker.owner, tracker.tracker_id) == tracker
    assert await tracker_repo.exists(tracker.owner, tracker.tracker_id) is True


async def test_get_returns_none_for_unknown_key(tracker_repo: InMemoryTrackerRepository) -> None:
    assert await tracker_repo.get("alice", "nope_team") is None


async def test_list_by_owner_is_oldest_first(
    tracker_repo: InMemoryTrackerRepository,
    tracker_factory: Callable[..., Tracker],
    now_utc: datetime,
) -> None:
    newer = tracker_factory(track_type=TrackType.TEAM, created_at=now_utc + timedelta(minutes=5))
    older = tracker_factory(track_type=TrackType.TOP_HOLDERS, created_at=now_utc)

    await tracker_repo.save(newer)
    await tracker_repo.save(older)

    listed = await tracker_repo.list_by_owner("alice")
    assert [t.tracker_id for t in listed] == [older.tracker_id, newer.tracker_id]


async def test_delete_drops_empty_owner_and_reports_missing(
    tracker_repo: InMemoryTrackerRepository,
    tracker_factory: Callable[..., Tracker],
) -> None:
    tracker = tracker_factory()
    await tracker_repo.save(tracker)

    assert await tracker_repo.delete(tracker.owner, tracker.tracker_id) is True
    assert await tracker_repo.delete(tracker.owner, tracker.tracker_id) is False
    assert await tracker_repo.count_by_owner(tracker.owner) == 0
    assert await tracker_repo.list_all() == []


async def test_save_replaces_existing_entry(
    tracker_repo: InMemoryTrackerRepository,
    tracker_factory: Callable[..., Tracker],
) -> None:
    tracker = tracker_factory(initial_percentage="1")
    await tracker_repo.save(tracker)
    await tracker_repo.save(tracker_factory(initial_percentage="2"))

    assert await tracker_repo.count_by_owner("alice") == 1
    stored = await tracker_repo.get(tracker.owner, tracker.tracker_id)
    assert stored is not None and str(stored.current_percentage) == "2"
