"""Snapshot and restore of tracker state."""

from supply_tracker.services.persistence.persistence_manager import PersistenceManager

__all__ = ["PersistenceManager"]
