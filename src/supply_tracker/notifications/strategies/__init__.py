"""Notification strategies."""

from supply_tracker.notifications.strategies.base import (
    BaseNotificationStrategy,
)
from supply_tracker.notifications.strategies.console import ConsoleNotifier
from supply_tracker.notifications.strategies.telegram import TelegramNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "TelegramNotifier",
]
