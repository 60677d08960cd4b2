"""In-memory repository implementations."""

from supply_tracker.persistence.repositories.in_memory.tracker_repository import (
    InMemoryTrackerRepository,
)

__all__ = ["InMemoryTrackerRepository"]
