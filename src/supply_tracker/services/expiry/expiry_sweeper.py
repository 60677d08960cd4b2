# -*- coding: utf-8 -*-
"""ExpirySweeper: removes trackers older than the configured lifetime."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Optional

import structlog

from supply_tracker.events.trackers.tracker_events import TrackerExpiredEvent
from supply_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from supply_tracker.config import Settings
    from supply_tracker.models.tracker import Tracker
    from supply_tracker.notifications.notification_manager import NotificationService
    from supply_tracker.services.registry import TrackerRegistry
    from supply_tracker.services.scheduler import PollingScheduler


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _format_lifetime(hours: float) -> str:
    return f"{hours:g} hours"


class ExpirySweeper:
    """Periodically expires trackers whose age exceeds ttl_hours.

    A tracker is removed under the registry lock only if it is still expired at
    that moment, so a concurrent stop or a second sweep never produces a second
    notice.
    """

    def __init__(
        self,
        registry: "TrackerRegistry",
        scheduler: "PollingScheduler",
        notification_service: "NotificationService",
        settings: "Settings",
        event_bus: Optional[Any] = None,
        *,
        now: Callable[[], datetime] = _utc_now,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._registry = registry
        self._scheduler = scheduler
        self._notifications = notification_service
        self._event_bus: Optional["EventBus"] = event_bus
        tr = settings.tracker
        self._ttl_hours = tr.ttl_hours
        self._ttl = timedelta(hours=tr.ttl_hours)
        self._interval = tr.sweep_seconds
        self._now = now
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def sweep(self) -> list["Tracker"]:
        """Expire every tracker past its lifetime. Return the trackers removed."""
        now = self._now()
        expired: list["Tracker"] = []
        for candidate in await self._registry.all_trackers():
            if not candidate.is_expired(now, self._ttl):
                continue
            # Remove before notifying: only the caller that wins the removal sends the notice.
            removed = await self._registry.remove_if(
                candidate.owner,
                candidate.tracker_id,
                lambda t: t.is_expired(now, self._ttl),
            )
            if removed is None:
                continue
            self._scheduler.cancel(removed.owner, removed.tracker_id)
            self._notify_expired(removed)
            if self._event_bus is not None:
                self._event_bus.dispatch(
                    TrackerExpiredEvent(owner=removed.owner, tracker_id=removed.tracker_id)
                )
            expired.append(removed)

        if expired:
            self._logger.info("expiry_sweep_complete", trackers_expired=len(expired))
        return expired

    def _notify_expired(self, tracker: "Tracker") -> None:
        lifetime = _format_lifetime(self._ttl_hours)
        self._logger.info(
            "tracker_expired",
            owner=tracker.owner,
            tracker_id=tracker.tracker_id,
            track_type=tracker.track_type.value,
        )
        self._notifications.notify(
            NotificationMessage(
                event_type="tracker_expired",
                message=(
                    f"Tracking of {tracker.track_type.label.lower()} supply for {tracker.ticker} "
                    f"has ended after {lifetime}.\n\n"
                    "Start a new tracking if you want to keep monitoring this token."
                ),
                destination=tracker.destination,
                payload={
                    "owner": tracker.owner,
                    "tracker_id": tracker.tracker_id,
                    "ticker": tracker.ticker,
                    "track_type": tracker.track_type.value,
                },
            )
        )

    async def run(self) -> None:
        """Sweep every sweep_seconds until cancelled. A failed sweep is logged."""
        while True:
            await self._sleep(self._interval)
            try:
                await self.sweep()
            except Exception as e:
                self._logger.error(
                    "expiry_sweep_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
