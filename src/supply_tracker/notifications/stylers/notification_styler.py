# -*- coding: utf-8 -*-
"""Event-based notification styler with emoji headers (Telegram-style)."""

from __future__ import annotations

from html import escape

from supply_tracker.notifications.types import NotificationMessage, NotificationStyler


class SupplyNotificationStyler(NotificationStyler):
    """Render notifications by event_type: emoji + title header, then the message body."""

    _TITLES: dict[str, tuple[str, str]] = {
        "supply_change_up": ("📈", "Supply Change"),
        "supply_change_down": ("📉", "Supply Change"),
        "tracker_expired": ("⌛", "Tracking Expired"),
        "tracker_error": ("⚠️", "Tracking Error"),
        "system_started": ("▶️", "System Started"),
        "system_stopped": ("⏹️", "System Stopped"),
    }

    def render(self, message: NotificationMessage, *, parse_html: bool = False) -> str:
        emoji, title = self._title(message)
        body = message.message
        if parse_html:
            return f"{emoji} <b>{escape(title)}</b>\n\n{escape(body)}".strip()
        return f"{emoji} {title}\n\n{body}".strip()

    def _title(self, message: NotificationMessage) -> tuple[str, str]:
        emoji, default_title = self._TITLES.get(
            message.event_type,
            ("ℹ️", message.event_type.replace("_", " ").title()),
        )
        return emoji, message.title or default_title
