"""Configuration subpackage."""

from supply_tracker.config.config import (
    AccessSettings,
    ApiSettings,
    AppSettings,
    ConsoleNotificationSettings,
    LoggingSettings,
    Settings,
    TelegramNotificationSettings,
    TrackerSettings,
    get_settings,
)

__all__ = [
    "AccessSettings",
    "ApiSettings",
    "AppSettings",
    "ConsoleNotificationSettings",
    "LoggingSettings",
    "Settings",
    "TelegramNotificationSettings",
    "TrackerSettings",
    "get_settings",
]
