# -*- coding: utf-8 -*-
"""Console notifier (print-based)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from supply_tracker.notifications.types import NotificationMessage
from supply_tracker.notifications.strategies.base import BaseNotificationStrategy
from supply_tracker.config import Settings

if TYPE_CHECKING:  # pragma: no cover
    from supply_tracker.notifications.types import NotificationStyler


class ConsoleNotifier(BaseNotificationStrategy):
    """Print notifications to stdout, prefixed with their destination."""

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler"
    ) -> None:
        super().__init__(settings)
        self._running = False
        self._styler = styler

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        """Send a notification to the console."""
        if not self.is_running or not self.settings.console.enabled:
            return
        body = self._styler.render(message, parse_html=False)
        print(f"[{message.destination or '-'}] {body}")
