"""Snapshot document: JSON encoding of tracker state with exact decimals."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from supply_tracker.exceptions import SnapshotCorruptError
from supply_tracker.models.tracker import TrackType, Tracker

SNAPSHOT_VERSION = 1


def _check_decimal(value: str) -> str:
    try:
        parsed = Decimal(value)
    except InvalidOperation as e:
        raise ValueError(f"not a decimal: {value!r}") from e
    if not parsed.is_finite():
        raise ValueError(f"not a finite decimal: {value!r}")
    return value


class TrackerRecord(BaseModel):
    """One persisted tracker. Decimals are kept as their str() form so they round-trip exactly."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    owner: str
    tracker_id: str
    destination: str
    wallets: list[str]
    token_address: str
    ticker: str
    decimals: int = Field(ge=0)
    total_supply: str
    track_type: TrackType
    baseline_percentage: str
    current_percentage: str
    significant_change_threshold: str
    created_at: datetime

    @field_validator(
        "total_supply",
        "baseline_percentage",
        "current_percentage",
        "significant_change_threshold",
    )
    @classmethod
    def _decimal_string(cls, v: str) -> str:
        return _check_decimal(v)

    @field_validator("significant_change_threshold")
    @classmethod
    def _positive_threshold(cls, v: str) -> str:
        if Decimal(v) <= 0:
            raise ValueError(f"threshold must be > 0, got {v!r}")
        return v

    @field_validator("created_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("created_at must be timezone-aware")
        return v

    @classmethod
    def from_tracker(cls, tracker: Tracker) -> TrackerRecord:
        return cls(
            owner=tracker.owner,
            tracker_id=tracker.tracker_id,
            destination=tracker.destination,
            wallets=list(tracker.wallets),
            token_address=tracker.token_address,
            ticker=tracker.ticker,
            decimals=tracker.decimals,
            total_supply=str(tracker.total_supply),
            track_type=tracker.track_type,
            baseline_percentage=str(tracker.baseline_percentage),
            current_percentage=str(tracker.current_percentage),
            significant_change_threshold=str(tracker.significant_change_threshold),
            created_at=tracker.created_at,
        )

    def to_tracker(self) -> Tracker:
        return Tracker(
            owner=self.owner,
            tracker_id=self.tracker_id,
            destination=self.destination,
            wallets=tuple(self.wallets),
            token_address=self.token_address,
            ticker=self.ticker,
            decimals=self.decimals,
            total_supply=Decimal(self.total_supply),
            track_type=self.track_type,
            baseline_percentage=Decimal(self.baseline_percentage),
            current_percentage=Decimal(self.current_percentage),
            significant_change_threshold=Decimal(self.significant_change_threshold),
            created_at=self.created_at,
        )


class SnapshotDocument(BaseModel):
    """Top-level snapshot file."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    version: Literal[1] = SNAPSHOT_VERSION
    saved_at: datetime
    trackers: list[TrackerRecord]


def encode_snapshot(trackers: Iterable[Tracker], saved_at: datetime) -> bytes:
    """Serialize trackers into UTF-8 JSON bytes."""
    document = SnapshotDocument(
        saved_at=saved_at,
        trackers=[TrackerRecord.from_tracker(t) for t in trackers],
    )
    return document.model_dump_json(indent=2).encode("utf-8")


def decode_snapshot(data: bytes) -> SnapshotDocument:
    """Parse snapshot bytes.

    Raises:
        SnapshotCorruptError: If the bytes are not a valid version-1 document.
    """
    try:
        return SnapshotDocument.model_validate_json(data)
    except ValidationError as e:
        raise SnapshotCorruptError(f"Invalid snapshot: {e.error_count()} error(s)") from e
