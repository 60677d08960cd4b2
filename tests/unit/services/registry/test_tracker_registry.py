# -*- coding: utf-8 -*-
"""Unit tests for TrackerRegistry quotas, uniqueness and updates."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from supply_tracker.exceptions import DuplicateTrackerError, QuotaExceededError
from supply_tracker.models.tracker import Tracker, TrackType
from supply_tracker.services.registry import TrackerRegistry

_TOKENS = [
    "So11111111111111111111111111111111111111112",
    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263",
    "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN",
    "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So",
    "7vfCXTUXx5WJV5JADk17DUJ4ksgau7utNKj4b963voxs",
    "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R",
    "rndrizKT3MK1iimdxRdWabcF7Zg7AR5T4nud4EkHBof",
    "HZ1JovNiVvGrGNiiYvEozEVgZ58xaU3RKwX8eACQBCt3",
    "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm",
    "85VBFQZC9TZkfaptBWjvUw7YbZjy52A6mjtPGjstQAmQ",
]


async def test_default_role_quota_is_enforced_before_duplicate_check(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    await registry.register(tracker_factory(token_address=_TOKENS[0]))
    await registry.register(tracker_factory(token_address=_TOKENS[1]))

    with pytest.raises(QuotaExceededError) as exc_info:
        await registry.register(tracker_factory(token_address=_TOKENS[2]))
    with pytest.raises(QuotaExceededError):
        await registry.register(tracker_factory(token_address=_TOKENS[0]))

    assert exc_info.value.quota == 2
    assert len(await registry.list_by_owner("alice")) == 2


async def test_vip_quota_allows_ten(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    for token in _TOKENS[:10]:
        await registry.register(tracker_factory(owner="vipuser", token_address=token))

    with pytest.raises(QuotaExceededError):
        await registry.register(tracker_factory(owner="vipuser", token_address=_TOKENS[10]))


async def test_admin_is_unlimited(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    for token in _TOKENS:
        await registry.register(tracker_factory(owner="boss", token_address=token))

    assert len(await registry.list_by_owner("boss")) == len(_TOKENS)


async def test_duplicate_tracker_is_rejected(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    first = await registry.register(tracker_factory())

    with pytest.raises(DuplicateTrackerError) as exc_info:
        await registry.register(tracker_factory())

    assert exc_info.value.tracker_id == first.tracker_id


async def test_same_token_different_track_type_is_not_a_duplicate(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    await registry.register(tracker_factory(track_type=TrackType.TEAM))
    await registry.register(tracker_factory(track_type=TrackType.TOP_HOLDERS))

    assert len(await registry.list_by_owner("alice")) == 2


async def test_owners_are_independent(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    await registry.register(tracker_factory(owner="alice"))
    await registry.register(tracker_factory(owner="bob"))

    assert len(await registry.all_trackers()) == 2


async def test_remove_is_idempotent_and_frees_quota(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    a = await registry.register(tracker_factory(token_address=_TOKENS[0]))
    await registry.register(tracker_factory(token_address=_TOKENS[1]))

    assert await registry.remove("alice", a.tracker_id) == a
    assert await registry.remove("alice", a.tracker_id) is None

    await registry.register(tracker_factory(token_address=_TOKENS[2]))
    assert len(await registry.list_by_owner("alice")) == 2


async def test_update_if_present_skips_missing_tracker(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
    D: Callable[[Any], Decimal],
) -> None:
    tracker = tracker_factory()

    result = await registry.update_if_present(
        tracker.owner,
        tracker.tracker_id,
        lambda t: t.with_observation(D("1"), rebase=False),
    )

    assert result is None
    assert await registry.all_trackers() == []


async def test_remove_if_checks_predicate_against_stored_state(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    tracker = await registry.register(tracker_factory())

    kept = await registry.remove_if(tracker.owner, tracker.tracker_id, lambda t: False)
    removed = await registry.remove_if(tracker.owner, tracker.tracker_id, lambda t: True)

    assert kept is None
    assert removed == tracker


async def test_load_bypasses_quota_and_keeps_existing(
    registry: TrackerRegistry,
    tracker_factory: Callable[..., Tracker],
) -> None:
    restored = [tracker_factory(token_address=t) for t in _TOKENS[:3]]

    loaded = await registry.load(restored)
    again = await registry.load(restored)

    assert loaded == 3
    assert again == 0
    assert len(await registry.list_by_owner("alice")) == 3
