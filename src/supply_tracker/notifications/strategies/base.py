# -*- coding: utf-8 -*-
"""Base notification strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from supply_tracker.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from supply_tracker.config.config import Settings


class BaseNotificationStrategy(ABC):
    """Abstract delivery channel (console, Telegram, ...)."""

    def __init__(self, settings: "Settings"):
        """
        Args:
            settings: Global settings.
        """
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the channel is ready to send."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Open the channel."""
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Close the channel."""
        pass

    @abstractmethod
    async def send_notification(
        self,
        message: NotificationMessage,
    ) -> None:
        """
        Deliver one message.

        Raises:
            DeliveryError: If the message could not be delivered.
        """
        pass
