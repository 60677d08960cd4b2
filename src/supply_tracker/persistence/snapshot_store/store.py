# -*- coding: utf-8 -*-
"""Durable byte store for tracker snapshots."""

from __future__ import annotations

import asyncio
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from supply_tracker.exceptions import SnapshotNotFoundError


class ISnapshotStore(ABC):
    """Opaque byte storage: one current snapshot, replaced as a whole."""

    @abstractmethod
    async def write_snapshot(self, data: bytes) -> None:
        """Replace the stored snapshot with data."""
        ...

    @abstractmethod
    async def read_snapshot(self) -> bytes:
        """Return the stored snapshot.

        Raises:
            SnapshotNotFoundError: If nothing has been written yet.
        """
        ...


class InMemorySnapshotStore(ISnapshotStore):
    """Keeps the last snapshot in memory (tests, ephemeral runs)."""

    def __init__(self, data: bytes | None = None) -> None:
        self._data = data
        self.writes = 0

    async def write_snapshot(self, data: bytes) -> None:
        self._data = bytes(data)
        self.writes += 1

    async def read_snapshot(self) -> bytes:
        if self._data is None:
            raise SnapshotNotFoundError("No snapshot written yet")
        return self._data


def _write_atomic(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise SnapshotNotFoundError(f"No snapshot at {path}") from e


class FileSnapshotStore(ISnapshotStore):
    """Stores the snapshot in one file, written via temp file + os.replace.

    Blocking file I/O runs in a worker thread so the event loop keeps serving ticks.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def write_snapshot(self, data: bytes) -> None:
        await asyncio.to_thread(_write_atomic, self._path, data)

    async def read_snapshot(self) -> bytes:
        return await asyncio.to_thread(_read, self._path)
