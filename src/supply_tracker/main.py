# -*- coding: utf-8 -*-
"""
Entry point for the supply tracker.

Orchestrates: logging, settings, container, notifications, restore + global loops, shutdown (SIGINT or CancelledError).
The registry lives in this process only: a front-end must run in the same process and event loop
and start trackers through the container's supply_tracking_service(). Without one, this process
restores the persisted trackers and keeps polling them.

Run with: python -m supply_tracker.main
"""
from __future__ import annotations

import asyncio
import signal

import structlog

from supply_tracker.DI import Container
from supply_tracker.config import get_settings
from supply_tracker.exceptions import MissingRequiredConfigError
from supply_tracker.logging.config import configure_logging
from supply_tracker.notifications.types import NotificationMessage


def _setup_sigint(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(
            signal.SIGINT,
            lambda: shutdown_event.set(),
        )
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()
    if not settings.api.solana_rpc_url.strip():
        logger.error("main_missing_rpc_url", message="API__SOLANA_RPC_URL is not set")
        raise MissingRequiredConfigError("API__SOLANA_RPC_URL")

    container = Container()
    http_client = container.http_client()
    notification_service = container.notification_service()
    runner = container.tracking_runner()
    await notification_service.initialize()
    shutdown_event = asyncio.Event()
    _setup_sigint(shutdown_event)

    tr = settings.tracker
    logger.info(
        "main_started",
        poll_seconds=tr.poll_seconds,
        ttl_hours=tr.ttl_hours,
        snapshot_path=tr.snapshot_path,
    )
    notification_service.notify(
        NotificationMessage(
            event_type="system_started",
            message="Supply tracker started",
        )
    )
    try:
        await runner.run(shutdown_event)
    finally:
        notification_service.notify(
            NotificationMessage(
                event_type="system_stopped",
                message="Supply tracker stopped",
            )
        )
        await notification_service.shutdown()
        await http_client.aclose()
        logger.info("main_shutdown_complete")


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
