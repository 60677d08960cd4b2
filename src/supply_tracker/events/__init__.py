# -*- coding: utf-8 -*-
"""Event bus and event types."""

from supply_tracker.events.bus import get_event_bus
from supply_tracker.events.trackers import (
    SupplyChangeDetectedEvent,
    TrackerExpiredEvent,
    TrackerStartedEvent,
    TrackerStoppedEvent,
)

__all__ = [
    "get_event_bus",
    "SupplyChangeDetectedEvent",
    "TrackerExpiredEvent",
    "TrackerStartedEvent",
    "TrackerStoppedEvent",
]
