"""Snapshot storage and encoding."""

from supply_tracker.persistence.snapshot_store.codec import (
    SNAPSHOT_VERSION,
    SnapshotDocument,
    TrackerRecord,
    decode_snapshot,
    encode_snapshot,
)
from supply_tracker.persistence.snapshot_store.store import (
    FileSnapshotStore,
    ISnapshotStore,
    InMemorySnapshotStore,
)

__all__ = [
    "SNAPSHOT_VERSION",
    "SnapshotDocument",
    "TrackerRecord",
    "decode_snapshot",
    "encode_snapshot",
    "FileSnapshotStore",
    "ISnapshotStore",
    "InMemorySnapshotStore",
]
