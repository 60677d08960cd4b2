# -*- coding: utf-8 -*-
"""PollingScheduler: one periodic poll task per live tracker."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog

from supply_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:
    from supply_tracker.config import Settings
    from supply_tracker.models.tracker import Tracker
    from supply_tracker.notifications.notification_manager import NotificationService
    from supply_tracker.services.aggregation import BalanceAggregator
    from supply_tracker.services.detection import ChangeDecision, ChangeDetector
    from supply_tracker.services.registry import TrackerRegistry

TrackerKey = tuple[str, str]


class PollingScheduler:
    """Runs tick() for each armed tracker every poll_seconds.

    Ticks of the same tracker never overlap: each tracker has a single task that
    sleeps, ticks, then sleeps again. A failed tick is logged and the tracker stays
    armed. After failure_notify_after consecutive failures the owner gets one
    error notice; the counter resets on the next successful tick.
    """

    def __init__(
        self,
        registry: "TrackerRegistry",
        aggregator: "BalanceAggregator",
        detector: "ChangeDetector",
        notification_service: "NotificationService",
        settings: "Settings",
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            registry: Live tracker store.
            aggregator: Computes the cohort percentage.
            detector: Applies the observation and notifies on significant change.
            notification_service: Sink for the consecutive-failure notice.
            settings: Application settings (uses settings.tracker.poll_seconds, failure_notify_after).
            sleep: Awaitable sleep (injected for tests).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._registry = registry
        self._aggregator = aggregator
        self._detector = detector
        self._notifications = notification_service
        self._poll_seconds = settings.tracker.poll_seconds
        self._failure_notify_after = settings.tracker.failure_notify_after
        self._sleep = sleep
        self._tasks: dict[TrackerKey, asyncio.Task[None]] = {}
        self._failures: dict[TrackerKey, int] = {}
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def armed_count(self) -> int:
        return len(self._tasks)

    def is_armed(self, owner: str, tracker_id: str) -> bool:
        task = self._tasks.get((owner, tracker_id))
        return task is not None and not task.done()

    def arm(self, tracker: "Tracker") -> bool:
        """Start polling tracker. Return False if it is already armed."""
        key = (tracker.owner, tracker.tracker_id)
        if self.is_armed(*key):
            return False
        self._failures.pop(key, None)
        self._tasks[key] = asyncio.create_task(
            self._loop(key),
            name=f"poll:{tracker.owner}:{tracker.tracker_id}",
        )
        self._logger.debug(
            "scheduler_armed",
            owner=tracker.owner,
            tracker_id=tracker.tracker_id,
            poll_seconds=self._poll_seconds,
        )
        return True

    def cancel(self, owner: str, tracker_id: str) -> bool:
        """Stop polling a tracker. Return False if it was not armed."""
        key = (owner, tracker_id)
        task = self._tasks.pop(key, None)
        self._failures.pop(key, None)
        if task is None:
            return False
        if task is not asyncio.current_task():
            task.cancel()
        self._logger.debug("scheduler_cancelled", owner=owner, tracker_id=tracker_id)
        return True

    async def cancel_all(self) -> None:
        """Cancel every poll task and wait for them to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        self._failures.clear()
        for t in tasks:
            t.cancel()
        for t in tasks:
            try:
                await t
            except asyncio.CancelledError:
                pass

    async def tick(self, owner: str, tracker_id: str) -> "ChangeDecision | None":
        """Poll one tracker once. Return None if the tracker no longer exists.

        Raises whatever aggregation raises; the caller decides how to report it.
        """
        tracker = await self._registry.get(owner, tracker_id)
        if tracker is None:
            return None
        percentage = await self._aggregator.aggregate(
            tracker.wallets,
            tracker.token_address,
            tracker.total_supply,
            tracker.decimals,
        )
        return await self._detector.apply(self._registry, owner, tracker_id, percentage)

    async def _loop(self, key: TrackerKey) -> None:
        owner, tracker_id = key
        try:
            while True:
                await self._sleep(self._poll_seconds)
                try:
                    decision = await self.tick(owner, tracker_id)
                except Exception as e:
                    await self._on_tick_failed(key, e)
                    continue
                if decision is None and await self._registry.get(owner, tracker_id) is None:
                    self._logger.debug("scheduler_tracker_gone", owner=owner, tracker_id=tracker_id)
                    return
                self._failures.pop(key, None)
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                del self._tasks[key]

    async def _on_tick_failed(self, key: TrackerKey, error: Exception) -> None:
        owner, tracker_id = key
        tracker = await self._registry.get(owner, tracker_id)
        failures = self._failures.get(key, 0) + 1
        self._failures[key] = failures
        self._logger.error(
            "tracker_tick_failed",
            owner=owner,
            tracker_id=tracker_id,
            track_type=tracker.track_type.value if tracker else None,
            consecutive_failures=failures,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        if tracker is None or failures != self._failure_notify_after:
            return
        self._notifications.notify(
            NotificationMessage(
                event_type="tracker_error",
                message=(
                    f"Error occurred while tracking {tracker.track_type.label.lower()} supply "
                    f"for {tracker.ticker}\n\n"
                    f"Error: {error}\n\n"
                    "Tracking will continue, but you may want to check the tracked supply again."
                ),
                destination=tracker.destination,
                payload={
                    "owner": owner,
                    "tracker_id": tracker_id,
                    "consecutive_failures": failures,
                },
            )
        )
