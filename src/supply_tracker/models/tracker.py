"""Tracker: one supply monitoring session for a token and a wallet cohort.

Identity is (owner, tracker_id) where tracker_id = "<token_address>_<track_type>".
Instances are immutable; every poll produces a new copy through with_observation()
and the registry swaps it in, so a tracker removed mid-tick is never written back.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

from supply_tracker.exceptions import InvalidThresholdError
from supply_tracker.utils.decimal_math import ZERO, to_decimal


class TrackType(str, Enum):
    """Wallet cohort being summed. A label only; aggregation is identical."""

    TEAM = "team"
    TOP_HOLDERS = "topHolders"

    @property
    def label(self) -> str:
        """Human label used in notifications."""
        return "Team" if self is TrackType.TEAM else "Top holders"


class Role(str, Enum):
    """Owner role; selects the tracker quota."""

    ADMIN = "admin"
    VIP = "vip"
    DEFAULT = "default"


def make_tracker_id(token_address: str, track_type: TrackType) -> str:
    """Return the per-owner tracker key for a token and cohort."""
    return f"{token_address.strip()}_{track_type.value}"


@dataclass(frozen=True, slots=True)
class Tracker:
    """State of one monitoring session.

    - baseline_percentage: reference for threshold checks; moves only when a change is notified.
    - current_percentage: last observed value; may drift from the baseline between notifications.
    """

    owner: str
    tracker_id: str
    destination: str
    """Where notifications go (chat/channel id)."""
    wallets: tuple[str, ...]
    token_address: str
    ticker: str
    decimals: int
    total_supply: Decimal
    """Total supply in human units, fixed at creation."""
    track_type: TrackType
    baseline_percentage: Decimal
    current_percentage: Decimal
    significant_change_threshold: Decimal
    created_at: datetime

    def with_observation(self, new_percentage: Decimal, *, rebase: bool) -> Tracker:
        """Return a copy with current_percentage set (and the baseline too when rebase)."""
        return replace(
            self,
            current_percentage=new_percentage,
            baseline_percentage=new_percentage if rebase else self.baseline_percentage,
        )

    def age(self, now: datetime) -> timedelta:
        """Time elapsed since creation."""
        return now - self.created_at

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        """True when the tracker is strictly older than ttl."""
        return self.age(now) > ttl

    @classmethod
    def create(
        cls,
        *,
        owner: str,
        destination: str,
        token_address: str,
        wallets: list[str] | tuple[str, ...],
        track_type: TrackType | str,
        total_supply: Any,
        decimals: int,
        ticker: str,
        initial_percentage: Any,
        threshold: Any,
        created_at: datetime | None = None,
    ) -> Tracker:
        """Create a new tracker; baseline and current start at initial_percentage."""
        token_address = token_address.strip()
        if not token_address:
            raise ValueError("token_address must be non-empty")
        if decimals < 0:
            raise ValueError("decimals must be >= 0")
        track_type = TrackType(track_type)
        threshold_d = to_decimal(threshold)
        if not threshold_d.is_finite() or threshold_d <= ZERO:
            raise InvalidThresholdError(f"threshold must be > 0, got {threshold}")
        initial = to_decimal(initial_percentage)
        if not initial.is_finite():
            raise ValueError(f"initial_percentage must be finite, got {initial_percentage}")
        return cls(
            owner=owner,
            tracker_id=make_tracker_id(token_address, track_type),
            destination=str(destination),
            wallets=tuple(wallets),
            token_address=token_address,
            ticker=ticker,
            decimals=decimals,
            total_supply=to_decimal(total_supply),
            track_type=track_type,
            baseline_percentage=initial,
            current_percentage=initial,
            significant_change_threshold=threshold_d,
            created_at=created_at or datetime.now(UTC),
        )


@dataclass(frozen=True, slots=True)
class TrackerSummary:
    """Listing view of a tracker for the front-end."""

    tracker_id: str
    token_address: str
    ticker: str
    current_percentage: Decimal
    track_type: TrackType
    threshold: Decimal

    @classmethod
    def from_tracker(cls, tracker: Tracker) -> TrackerSummary:
        return cls(
            tracker_id=tracker.tracker_id,
            token_address=tracker.token_address,
            ticker=tracker.ticker,
            current_percentage=tracker.current_percentage,
            track_type=tracker.track_type,
            threshold=tracker.significant_change_threshold,
        )
