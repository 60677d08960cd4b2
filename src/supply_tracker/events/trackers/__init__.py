# -*- coding: utf-8 -*-
"""Tracker lifecycle events."""

from supply_tracker.events.trackers.tracker_events import (
    SupplyChangeDetectedEvent,
    TrackerExpiredEvent,
    TrackerStartedEvent,
    TrackerStoppedEvent,
)

__all__ = [
    "SupplyChangeDetectedEvent",
    "TrackerExpiredEvent",
    "TrackerStartedEvent",
    "TrackerStoppedEvent",
]
