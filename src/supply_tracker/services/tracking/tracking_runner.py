# -*- coding: utf-8 -*-
"""Orchestrator: restores state, runs the global loops until shutdown, writes a final snapshot."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog

if TYPE_CHECKING:
    from supply_tracker.config import Settings
    from supply_tracker.services.expiry import ExpirySweeper
    from supply_tracker.services.persistence import PersistenceManager
    from supply_tracker.services.scheduler import PollingScheduler


class SupplyTrackingRunner:
    """Runs the snapshot and expiry loops until shutdown_event or CancelledError."""

    def __init__(
        self,
        persistence_manager: "PersistenceManager",
        expiry_sweeper: "ExpirySweeper",
        scheduler: "PollingScheduler",
        settings: "Settings",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            persistence_manager: Restore at startup, snapshot loop, final snapshot.
            expiry_sweeper: Startup sweep and sweep loop.
            scheduler: All tracker tasks are cancelled on shutdown.
            settings: Application settings (logged intervals).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._persistence = persistence_manager
        self._sweeper = expiry_sweeper
        self._scheduler = scheduler
        self._settings = settings
        self._tasks: list[asyncio.Task[None]] = []
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def start(self) -> int:
        """Restore trackers, sweep once, start the global loops. Return trackers restored."""
        restored = await self._persistence.restore()
        await self._sweeper.sweep()
        self._persistence.start()
        self._tasks = [
            asyncio.create_task(self._persistence.run(), name="snapshot-loop"),
            asyncio.create_task(self._sweeper.run(), name="expiry-loop"),
        ]
        tr = self._settings.tracker
        self._logger.info(
            "tracking_runner_started",
            trackers_restored=len(restored),
            poll_seconds=tr.poll_seconds,
            snapshot_seconds=tr.snapshot_seconds,
            sweep_seconds=tr.sweep_seconds,
        )
        return len(restored)

    async def stop(self) -> None:
        """Cancel every loop and tracker task, then write a final snapshot."""
        self._logger.info("tracking_runner_shutdown_started")
        tasks, self._tasks = self._tasks, []
        for t in tasks:
            t.cancel()
        for t in tasks:
            try:
                await t
            except asyncio.CancelledError:
                pass
        await self._scheduler.cancel_all()
        self._persistence.stop()
        await self._persistence.snapshot()
        self._logger.info("tracking_runner_shutdown_complete")

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """start(), wait for shutdown_event, then stop(). stop() also runs on cancellation."""
        await self.start()
        try:
            await shutdown_event.wait()
        except asyncio.CancelledError:
            self._logger.info(
                "tracking_runner_shutdown_cancelled",
                message="Task cancelled; stopping system",
            )
            await self.stop()
            raise
        await self.stop()
