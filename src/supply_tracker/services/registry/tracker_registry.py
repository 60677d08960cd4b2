# -*- coding: utf-8 -*-
"""TrackerRegistry: the single shared store of live trackers.

Every read and write goes through one asyncio.Lock. The lock only guards state
transitions; balance lookups and notifications happen outside it, and results
are written back with update_if_present(), which is a no-op for a tracker that
was stopped or expired in the meantime.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Optional

import structlog

from supply_tracker.exceptions import DuplicateTrackerError, QuotaExceededError
from supply_tracker.models.tracker import Tracker
from supply_tracker.services.access.role_provider import quota_for_role

if TYPE_CHECKING:
    from supply_tracker.config import Settings
    from supply_tracker.persistence.repositories.interfaces.tracker_repository import (
        ITrackerRepository,
    )
    from supply_tracker.services.access.role_provider import IRoleProvider


class TrackerRegistry:
    """Owner -> tracker_id -> Tracker map with quota and uniqueness rules."""

    def __init__(
        self,
        repository: "ITrackerRepository",
        role_provider: "IRoleProvider",
        settings: "Settings",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the registry.

        Args:
            repository: Backing tracker storage.
            role_provider: Resolves the owner's role for quota checks.
            settings: Application settings (uses settings.tracker quotas).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._repo = repository
        self._roles = role_provider
        self._settings = settings
        self._lock = asyncio.Lock()
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def register(self, tracker: Tracker) -> Tracker:
        """Insert a new tracker after quota then uniqueness checks.

        Raises:
            QuotaExceededError: If the owner already runs their role's quota.
            DuplicateTrackerError: If (owner, tracker_id) already exists.
        """
        async with self._lock:
            role = self._roles.get_role(tracker.owner)
            quota = quota_for_role(role, self._settings)
            if quota is not None and await self._repo.count_by_owner(tracker.owner) >= quota:
                self._logger.info(
                    "tracker_quota_exceeded",
                    owner=tracker.owner,
                    role=role.value,
                    quota=quota,
                )
                raise QuotaExceededError(tracker.owner, quota)
            if await self._repo.exists(tracker.owner, tracker.tracker_id):
                raise DuplicateTrackerError(tracker.owner, tracker.tracker_id)
            await self._repo.save(tracker)
        self._logger.debug(
            "tracker_registered",
            owner=tracker.owner,
            tracker_id=tracker.tracker_id,
            role=role.value,
        )
        return tracker

    async def remove(self, owner: str, tracker_id: str) -> Tracker | None:
        """Remove and return a tracker; None if it was not present."""
        async with self._lock:
            tracker = await self._repo.get(owner, tracker_id)
            if tracker is None:
                return None
            await self._repo.delete(owner, tracker_id)
            return tracker

    async def remove_if(
        self,
        owner: str,
        tracker_id: str,
        predicate: Callable[[Tracker], bool],
    ) -> Tracker | None:
        """Remove a tracker only if predicate holds for its current state."""
        async with self._lock:
            tracker = await self._repo.get(owner, tracker_id)
            if tracker is None or not predicate(tracker):
                return None
            await self._repo.delete(owner, tracker_id)
            return tracker

    async def get(self, owner: str, tracker_id: str) -> Tracker | None:
        async with self._lock:
            return await self._repo.get(owner, tracker_id)

    async def list_by_owner(self, owner: str) -> list[Tracker]:
        async with self._lock:
            return await self._repo.list_by_owner(owner)

    async def all_trackers(self) -> list[Tracker]:
        """Consistent copy of every tracker (used by snapshot and sweep)."""
        async with self._lock:
            return await self._repo.list_all()

    async def update_if_present(
        self,
        owner: str,
        tracker_id: str,
        change: Callable[[Tracker], Tracker],
    ) -> Tracker | None:
        """Apply change to the stored tracker and save it; no-op if it is gone.

        Returns the stored result, or None when the tracker no longer exists.
        """
        async with self._lock:
            current = await self._repo.get(owner, tracker_id)
            if current is None:
                return None
            updated = change(current)
            await self._repo.save(updated)
            return updated

    async def load(self, trackers: Iterable[Tracker]) -> int:
        """Insert restored trackers, bypassing quotas. Existing ids are kept."""
        loaded = 0
        async with self._lock:
            for tracker in trackers:
                if await self._repo.exists(tracker.owner, tracker.tracker_id):
                    continue
                await self._repo.save(tracker)
                loaded += 1
        return loaded
