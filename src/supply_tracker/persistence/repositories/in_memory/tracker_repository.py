# -*- coding: utf-8 -*-
"""In-memory tracker repository (owner -> tracker_id -> Tracker)."""

from __future__ import annotations

from supply_tracker.models.tracker import Tracker
from supply_tracker.persistence.repositories.interfaces.tracker_repository import (
    ITrackerRepository,
)


def _by_created_at(tracker: Tracker) -> str:
    """Sort key: created_at (oldest first)."""
    return tracker.created_at.isoformat()


class InMemoryTrackerRepository(ITrackerRepository):
    """In-memory implementation of ITrackerRepository.

    Not synchronized on its own; TrackerRegistry serializes access.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[str, dict[str, Tracker]] = {}

    async def get(self, owner: str, tracker_id: str) -> Tracker | None:
        """Return the tracker, or None if missing."""
        return self._store.get(owner, {}).get(tracker_id)

    async def save(self, tracker: Tracker) -> None:
        """Insert or replace a tracker."""
        self._store.setdefault(tracker.owner, {})[tracker.tracker_id] = tracker

    async def delete(self, owner: str, tracker_id: str) -> bool:
        """Remove a tracker; drop the owner bucket when it becomes empty."""
        trackers = self._store.get(owner)
        if trackers is None or tracker_id not in trackers:
            return False
        del trackers[tracker_id]
        if not trackers:
            del self._store[owner]
        return True

    async def list_by_owner(self, owner: str) -> list[Tracker]:
        """Return the owner's trackers, oldest first."""
        return sorted(self._store.get(owner, {}).values(), key=_by_created_at)

    async def list_all(self) -> list[Tracker]:
        """Return every tracker, grouped by owner, oldest first within an owner."""
        return [
            tracker
            for owner in self._store
            for tracker in sorted(self._store[owner].values(), key=_by_created_at)
        ]

    async def count_by_owner(self, owner: str) -> int:
        """Return how many trackers the owner has."""
        return len(self._store.get(owner, {}))
