"""Notification subsystem."""

from supply_tracker.notifications.notification_manager import (
    NotificationService,
)
from supply_tracker.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    TelegramNotifier,
)
from supply_tracker.notifications.stylers import SupplyNotificationStyler
from supply_tracker.notifications.types import (
    NotificationMessage,
    NotificationStyler,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "TelegramNotifier",
    "NotificationMessage",
    "NotificationService",
    "NotificationStyler",
    "SupplyNotificationStyler",
]
