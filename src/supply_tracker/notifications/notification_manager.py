"""Notification service: queues messages and fans them out to every channel."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from supply_tracker.notifications.strategies import BaseNotificationStrategy
from supply_tracker.notifications.types import NotificationMessage


@dataclass
class NotificationService:
    """Dispatch notifications to all configured channels.

    notify() never blocks the caller: messages go through a bounded queue and a
    single worker delivers them. Delivery is at-most-once; a channel that fails
    or exceeds send_timeout is logged and skipped, the others still receive it.
    """

    notifiers: list[BaseNotificationStrategy]
    queue_size: int = 1000
    send_timeout: float | None = 20.0
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger)
    _queue: asyncio.Queue[NotificationMessage] | None = field(init=False, default=None)
    _worker_task: asyncio.Task[None] | None = field(init=False, default=None)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._logger = self.get_logger("NotificationService")

    async def initialize(self) -> None:
        """Initialize all notifiers and start the delivery worker."""
        self._logger.debug(
            "notification_init_started",
            notification_notifiers_count=len(self.notifiers),
        )
        for notifier in self.notifiers:
            await notifier.initialize()
        if not self.notifiers:
            self._queue = None
            self._worker_task = None
            self._logger.info("notification_init_no_notifiers")
            return
        self._queue = asyncio.Queue[NotificationMessage](maxsize=self.queue_size)
        self._worker_task = asyncio.create_task(self._worker_loop())
        self._logger.debug(
            "notification_init_complete",
            notification_queue_size=self.queue_size,
        )

    async def shutdown(self) -> None:
        """Drain pending messages, stop the worker and shut down notifiers."""
        self._logger.debug("notification_shutdown_started")
        if self._queue is not None:
            self._queue.shutdown()
            await self._queue.join()
            self._logger.debug("notification_shutdown_queue_drained")
        if self._worker_task is not None:
            await self._worker_task
            self._worker_task = None
        self._queue = None

        for notifier in self.notifiers:
            await notifier.shutdown()
        self._logger.debug("notification_shutdown_complete")

    def notify(self, message: NotificationMessage) -> bool:
        """Enqueue a notification (non-blocking). Return False if it was dropped."""
        queue = self._queue
        if queue is None:
            if not self.notifiers:
                return False
            raise RuntimeError("NotificationService not initialized")
        try:
            queue.put_nowait(message)
        except asyncio.QueueFull:
            self._logger.warning(
                "notification_queue_full_dropped",
                notification_event_type=message.event_type,
                notification_destination=message.destination,
            )
            return False
        except asyncio.QueueShutDown:
            self._logger.warning(
                "notification_queue_closed_dropped",
                notification_event_type=message.event_type,
            )
            return False
        return True

    async def _worker_loop(self) -> None:
        queue = self._queue
        if queue is None:
            return
        while True:
            try:
                msg = await queue.get()
            except asyncio.QueueShutDown:
                self._logger.debug("notification_worker_shutting_down")
                break
            try:
                await self.dispatch(msg)
            finally:
                queue.task_done()

    async def dispatch(self, message: NotificationMessage) -> None:
        """Deliver one message to every notifier, isolating failures per notifier."""
        self._logger.debug(
            "notification_dispatch",
            notification_event_type=message.event_type,
            notification_notifiers_count=len(self.notifiers),
        )
        for notifier in self.notifiers:
            try:
                if self.send_timeout is None:
                    await notifier.send_notification(message)
                else:
                    await asyncio.wait_for(
                        notifier.send_notification(message),
                        timeout=self.send_timeout,
                    )
            except Exception as e:
                self._logger.error(
                    "notification_delivery_failed",
                    notification_notifier=type(notifier).__name__,
                    notification_event_type=message.event_type,
                    notification_destination=message.destination,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
