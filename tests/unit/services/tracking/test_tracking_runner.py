# -*- coding: utf-8 -*-
"""Unit tests for SupplyTrackingRunner startup and shutdown."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, Mock

from supply_tracker.services.tracking import SupplyTrackingRunner


async def _forever() -> None:
    await asyncio.Event().wait()


def _runner(settings: Any) -> tuple[SupplyTrackingRunner, Any, Any, Any]:
    persistence = SimpleNamespace(
        restore=AsyncMock(return_value=["t1", "t2"]),
        start=Mock(),
        stop=Mock(),
        run=Mock(side_effect=lambda: _forever()),
        snapshot=AsyncMock(return_value=True),
    )
    sweeper = SimpleNamespace(
        sweep=AsyncMock(return_value=[]),
        run=Mock(side_effect=lambda: _forever()),
    )
    scheduler = SimpleNamespace(cancel_all=AsyncMock())
    runner = SupplyTrackingRunner(
        persistence_manager=persistence,  # type: ignore[arg-type]
        expiry_sweeper=sweeper,  # type: ignore[arg-type]
        scheduler=scheduler,  # type: ignore[arg-type]
        settings=settings,
    )
    return runner, persistence, sweeper, scheduler


async def test_run_restores_sweeps_then_snapshots_on_shutdown(settings: Any) -> None:
    runner, persistence, sweeper, scheduler = _runner(settings)
    shutdown = asyncio.Event()
    shutdown.set()

    await runner.run(shutdown)

    persistence.restore.assert_awaited_once()
    sweeper.sweep.assert_awaited_once()
    persistence.start.assert_called_once()
    scheduler.cancel_all.assert_awaited_once()
    persistence.stop.assert_called_once()
    persistence.snapshot.assert_awaited_once()


async def test_start_returns_restored_count(settings: Any) -> None:
    runner, *_ = _runner(settings)

    assert await runner.start() == 2
    await runner.stop()


async def test_cancellation_still_writes_final_snapshot(settings: Any) -> None:
    runner, persistence, _, scheduler = _runner(settings)
    task = asyncio.create_task(runner.run(asyncio.Event()))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass

    scheduler.cancel_all.assert_awaited_once()
    persistence.snapshot.assert_awaited_once()
