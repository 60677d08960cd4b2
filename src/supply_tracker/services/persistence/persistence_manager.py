# -*- coding: utf-8 -*-
"""PersistenceManager: periodic and event-driven snapshots, startup restore."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Optional

import structlog

from supply_tracker.events.trackers.tracker_events import (
    SupplyChangeDetectedEvent,
    TrackerExpiredEvent,
    TrackerStartedEvent,
    TrackerStoppedEvent,
)
from supply_tracker.exceptions import SnapshotNotFoundError
from supply_tracker.persistence.snapshot_store import decode_snapshot, encode_snapshot

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from supply_tracker.config import Settings
    from supply_tracker.models.tracker import Tracker
    from supply_tracker.persistence.snapshot_store import ISnapshotStore
    from supply_tracker.services.registry import TrackerRegistry
    from supply_tracker.services.scheduler import PollingScheduler

_DIRTY_EVENTS = (
    TrackerStartedEvent,
    TrackerStoppedEvent,
    TrackerExpiredEvent,
    SupplyChangeDetectedEvent,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PersistenceManager:
    """Writes registry snapshots to an ISnapshotStore and restores them at startup.

    The registry is read under its lock; encoding and the store write happen
    outside it. A failed write is logged and retried on the next cycle.
    """

    def __init__(
        self,
        registry: "TrackerRegistry",
        scheduler: "PollingScheduler",
        store: "ISnapshotStore",
        settings: "Settings",
        event_bus: Optional[Any] = None,
        *,
        now: Callable[[], datetime] = _utc_now,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the manager.

        Args:
            registry: Live tracker store.
            scheduler: Re-armed for every restored tracker.
            store: Durable byte store.
            settings: Application settings (uses settings.tracker snapshot/ttl/timeout).
            event_bus: Optional; tracker events mark the state dirty and wake the snapshot loop.
            now: Clock (injected for tests).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._registry = registry
        self._scheduler = scheduler
        self._store = store
        self._event_bus: Optional["EventBus"] = event_bus
        tr = settings.tracker
        self._interval = tr.snapshot_seconds
        self._ttl = timedelta(hours=tr.ttl_hours)
        self._timeout = tr.call_timeout_seconds
        self._now = now
        self._dirty = asyncio.Event()
        self._subscribed = False
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to tracker events (idempotent)."""
        if self._event_bus is None or self._subscribed:
            return
        for event_type in _DIRTY_EVENTS:
            self._event_bus.on(event_type, self._on_tracker_event)
        self._subscribed = True
        self._logger.debug("persistence_subscribed")

    def stop(self) -> None:
        """Unsubscribe from tracker events."""
        if self._event_bus is None or not self._subscribed:
            return
        handlers = getattr(self._event_bus, "handlers", {})
        for event_type in _DIRTY_EVENTS:
            key = event_type.__name__
            if key in handlers:
                handlers[key] = [h for h in handlers[key] if h != self._on_tracker_event]
        self._subscribed = False

    def _on_tracker_event(self, event: Any) -> None:
        self.mark_dirty()

    def mark_dirty(self) -> None:
        """Request a snapshot before the next periodic one."""
        self._dirty.set()

    async def snapshot(self) -> bool:
        """Write all trackers to the store. Return False (and log) on failure."""
        trackers = await self._registry.all_trackers()
        try:
            data = encode_snapshot(trackers, self._now())
            await asyncio.wait_for(self._store.write_snapshot(data), timeout=self._timeout)
        except Exception as e:
            self._logger.warning(
                "snapshot_write_failed",
                trackers_count=len(trackers),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False
        self._logger.debug("snapshot_written", trackers_count=len(trackers))
        return True

    async def restore(self) -> list["Tracker"]:
        """Load the last snapshot into the registry and arm every non-expired tracker.

        A missing or unreadable snapshot leaves the registry empty.
        """
        try:
            data = await asyncio.wait_for(self._store.read_snapshot(), timeout=self._timeout)
            document = decode_snapshot(data)
        except SnapshotNotFoundError:
            self._logger.info("snapshot_not_found_starting_empty")
            return []
        except Exception as e:
            self._logger.warning(
                "snapshot_read_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return []

        now = self._now()
        restored: list["Tracker"] = []
        for record in document.trackers:
            tracker = record.to_tracker()
            if tracker.is_expired(now, self._ttl):
                self._logger.info(
                    "snapshot_tracker_expired_skipped",
                    owner=tracker.owner,
                    tracker_id=tracker.tracker_id,
                    created_at=tracker.created_at.isoformat(),
                )
                continue
            restored.append(tracker)

        await self._registry.load(restored)
        for tracker in restored:
            self._scheduler.arm(tracker)
        self._logger.info(
            "snapshot_restored",
            trackers_restored=len(restored),
            trackers_in_snapshot=len(document.trackers),
            snapshot_saved_at=document.saved_at.isoformat(),
        )
        return restored

    async def run(self) -> None:
        """Snapshot every snapshot_seconds, or sooner when marked dirty. Runs until cancelled."""
        self.start()
        while True:
            try:
                await asyncio.wait_for(self._dirty.wait(), timeout=self._interval)
            except TimeoutError:
                pass
            self._dirty.clear()
            await self.snapshot()
