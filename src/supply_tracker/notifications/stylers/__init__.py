"""Notification stylers."""

from supply_tracker.notifications.stylers.notification_styler import SupplyNotificationStyler

__all__ = ["SupplyNotificationStyler"]
