# -*- coding: utf-8 -*-
"""Abstract interface for tracker storage (in-memory, DB, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from supply_tracker.models.tracker import Tracker


class ITrackerRepository(ABC):
    """Interface for storing Tracker by (owner, tracker_id)."""

    @abstractmethod
    async def get(self, owner: str, tracker_id: str) -> Optional[Tracker]:
        """Return the tracker, or None if missing."""
        ...

    @abstractmethod
    async def save(self, tracker: Tracker) -> None:
        """Insert or replace a tracker (by owner, tracker_id)."""
        ...

    @abstractmethod
    async def delete(self, owner: str, tracker_id: str) -> bool:
        """Remove a tracker. Return True if it existed."""
        ...

    @abstractmethod
    async def list_by_owner(self, owner: str) -> list[Tracker]:
        """Return the owner's trackers, oldest first."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Tracker]:
        """Return every tracker of every owner."""
        ...

    async def count_by_owner(self, owner: str) -> int:
        """Return how many trackers the owner has. Default impl lists them."""
        return len(await self.list_by_owner(owner))

    async def exists(self, owner: str, tracker_id: str) -> bool:
        """Return True if (owner, tracker_id) is stored."""
        return await self.get(owner, tracker_id) is not None
