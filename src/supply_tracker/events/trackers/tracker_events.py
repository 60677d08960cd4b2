"""Tracker lifecycle events (emitted by SupplyTrackingService, PollingScheduler and ExpirySweeper)."""

from __future__ import annotations

from decimal import Decimal

from bubus import BaseEvent  # type: ignore[import-untyped]


class TrackerStartedEvent(BaseEvent[None]):
    """Emitted after a tracker is registered and armed."""

    owner: str
    tracker_id: str
    track_type: str


class TrackerStoppedEvent(BaseEvent[None]):
    """Emitted after an explicit stop removed a tracker."""

    owner: str
    tracker_id: str


class TrackerExpiredEvent(BaseEvent[None]):
    """Emitted after the sweeper removed a tracker past its lifetime."""

    owner: str
    tracker_id: str


class SupplyChangeDetectedEvent(BaseEvent[None]):
    """Emitted when a poll moved a tracker by at least its threshold and the baseline was rebased."""

    owner: str
    tracker_id: str
    previous_percentage: Decimal
    new_percentage: Decimal
