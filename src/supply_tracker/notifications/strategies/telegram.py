# -*- coding: utf-8 -*-
"""Telegram notification strategy (async)."""

from __future__ import annotations

import asyncio
import time
import structlog
from typing import Any, Callable, Optional, TYPE_CHECKING

from telegram import Bot
from telegram.error import (
    BadRequest,
    Forbidden,
    NetworkError,
    RetryAfter,
    TelegramError,
    TimedOut,
)
from telegram.request import HTTPXRequest

from supply_tracker.exceptions import DeliveryError
from supply_tracker.notifications.types import NotificationMessage
from supply_tracker.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:
    from supply_tracker.config.config import Settings
    from supply_tracker.notifications.types import NotificationStyler


class TelegramNotifier(BaseNotificationStrategy):
    """Send notifications to Telegram chats using python-telegram-bot.

    Each message goes to its own destination chat; messages without one go to
    the configured fallback chat_id.
    """

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._styler: "NotificationStyler" = styler

        cfg = self.settings.telegram
        if not cfg.enabled or not cfg.api_key:
            raise ValueError("TelegramNotifier requires an enabled config with api_key.")

        self.token: str = str(cfg.api_key)
        self.default_chat_id: Optional[str] = str(cfg.chat_id) if cfg.chat_id else None
        self.messages_per_minute = cfg.messages_per_minute
        self.max_retries = cfg.max_retries
        self.backoff_base_seconds = cfg.backoff_base_seconds

        self.connect_timeout = cfg.connect_timeout
        self.read_timeout = cfg.read_timeout
        self.write_timeout = cfg.write_timeout
        self.pool_timeout = cfg.pool_timeout

        self._bot: Optional[Bot] = None
        self._running = False
        self._message_timestamps: list[float] = []

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._running:
            self._logger.warning("telegram_already_running")
            return
        request = HTTPXRequest(
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            write_timeout=self.write_timeout,
            pool_timeout=self.pool_timeout,
        )
        self._bot = Bot(token=self.token, request=request)
        self._running = True

    async def shutdown(self) -> None:
        if not self._running:
            return
        self._bot = None
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self._running or self._bot is None:
            raise DeliveryError("Telegram notifier is not running", destination=message.destination)
        chat_id = message.destination or self.default_chat_id
        if not chat_id:
            raise DeliveryError("No destination chat for Telegram message")
        formatted = self._styler.render(message, parse_html=True)
        await self._send_message(self._bot, chat_id, formatted)

    async def _send_message(self, bot: Bot, chat_id: str, text: str) -> None:
        await self._apply_rate_limit()
        for attempt in range(1, self.max_retries + 2):
            try:
                await bot.send_message(chat_id=chat_id, text=text, parse_mode="HTML")
                self._message_timestamps.append(time.time())
                return
            except RetryAfter as exc:
                retry_after = exc.retry_after
                retry_seconds = (
                    retry_after.total_seconds()
                    if hasattr(retry_after, "total_seconds")
                    else float(retry_after)
                )
                self._logger.warning(
                    "telegram_rate_limit_retry_after",
                    retry_seconds=retry_seconds,
                )
                await asyncio.sleep(retry_seconds)
            except (BadRequest, Forbidden) as exc:
                raise DeliveryError(
                    f"Telegram rejected message: {exc}", destination=chat_id
                ) from exc
            except (NetworkError, TimedOut, TelegramError) as exc:
                backoff = min(60.0, self.backoff_base_seconds * (2 ** (attempt - 1)))
                self._logger.warning(
                    "telegram_error_retry",
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    max_retries=self.max_retries,
                    backoff_seconds=backoff,
                )
                await asyncio.sleep(backoff)

        raise DeliveryError("Telegram max retries exceeded; message dropped", destination=chat_id)

    async def _apply_rate_limit(self) -> None:
        if self.messages_per_minute <= 0:
            return

        now = time.time()
        window_start = now - 60
        self._message_timestamps = [t for t in self._message_timestamps if t >= window_start]
        if len(self._message_timestamps) >= self.messages_per_minute:
            sleep_time = 60 - (now - self._message_timestamps[0])
            if sleep_time > 0:
                await asyncio.sleep(sleep_time)
