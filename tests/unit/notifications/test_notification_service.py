# -*- coding: utf-8 -*-
"""Unit tests for NotificationService and SupplyNotificationStyler."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from supply_tracker.exceptions import DeliveryError
from supply_tracker.notifications import NotificationService, SupplyNotificationStyler
from supply_tracker.notifications.types import NotificationMessage


def _notifier(send: Any = None) -> Any:
    notifier = MagicMock()
    notifier.initialize = AsyncMock()
    notifier.shutdown = AsyncMock()
    notifier.send_notification = send or AsyncMock()
    return notifier


def _message(event_type: str = "supply_change_up", body: str = "hello") -> NotificationMessage:
    return NotificationMessage(event_type=event_type, message=body, destination="-100123")


async def test_notify_delivers_to_every_notifier() -> None:
    first, second = _notifier(), _notifier()
    service = NotificationService(notifiers=[first, second])
    await service.initialize()

    assert service.notify(_message()) is True
    await service.shutdown()

    first.send_notification.assert_awaited_once()
    second.send_notification.assert_awaited_once()
    first.shutdown.assert_awaited_once()


async def test_failing_notifier_does_not_block_others() -> None:
    broken = _notifier(AsyncMock(side_effect=DeliveryError("chat not found")))
    healthy = _notifier()
    service = NotificationService(notifiers=[broken, healthy])

    await service.dispatch(_message())

    healthy.send_notification.assert_awaited_once()


async def test_slow_notifier_is_bounded_by_timeout() -> None:
    async def _hang(message: NotificationMessage) -> None:
        await asyncio.sleep(5)

    slow = _notifier(AsyncMock(side_effect=_hang))
    healthy = _notifier()
    service = NotificationService(notifiers=[slow, healthy], send_timeout=0.01)

    await asyncio.wait_for(service.dispatch(_message()), timeout=1)

    healthy.send_notification.assert_awaited_once()


async def test_notify_drops_when_queue_is_full() -> None:
    service = NotificationService(notifiers=[_notifier()], queue_size=1)
    await service.initialize()

    results = [service.notify(_message()) for _ in range(3)]
    await service.shutdown()

    assert results[0] is True
    assert False in results


async def test_notify_without_notifiers_is_a_no_op() -> None:
    service = NotificationService(notifiers=[])
    await service.initialize()

    assert service.notify(_message()) is False
    await service.shutdown()


def test_notify_before_initialize_raises() -> None:
    service = NotificationService(notifiers=[_notifier()])

    with pytest.raises(RuntimeError):
        service.notify(_message())


def test_styler_renders_html_and_plain() -> None:
    styler = SupplyNotificationStyler()
    message = _message("supply_change_down", "Team now hold <5%")

    html = styler.render(message, parse_html=True)
    plain = styler.render(message)

    assert html.startswith("📉 <b>Supply Change</b>")
    assert "&lt;5%" in html
    assert plain == "📉 Supply Change\n\nTeam now hold <5%"


def test_styler_falls_back_to_event_type_title() -> None:
    styler = SupplyNotificationStyler()

    assert styler.render(_message("custom_event", "x")) == "ℹ️ Custom Event\n\nx"
