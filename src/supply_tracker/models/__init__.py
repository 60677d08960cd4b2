# -*- coding: utf-8 -*-
"""Domain models."""

from supply_tracker.models.tracker import (
    Role,
    TrackType,
    Tracker,
    TrackerSummary,
    make_tracker_id,
)

__all__ = [
    "Role",
    "TrackType",
    "Tracker",
    "TrackerSummary",
    "make_tracker_id",
]
