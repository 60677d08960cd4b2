"""Tracker registry."""

from supply_tracker.services.registry.tracker_registry import TrackerRegistry

__all__ = ["TrackerRegistry"]
