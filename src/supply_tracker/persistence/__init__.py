# -*- coding: utf-8 -*-
"""Persistence layer: tracker repositories and snapshot storage."""

from supply_tracker.persistence.repositories import (
    ITrackerRepository,
    InMemoryTrackerRepository,
)
from supply_tracker.persistence.snapshot_store import (
    FileSnapshotStore,
    ISnapshotStore,
    InMemorySnapshotStore,
    decode_snapshot,
    encode_snapshot,
)

__all__ = [
    "ITrackerRepository",
    "InMemoryTrackerRepository",
    "FileSnapshotStore",
    "ISnapshotStore",
    "InMemorySnapshotStore",
    "decode_snapshot",
    "encode_snapshot",
]
