"""Exceptions subpackage."""

from supply_tracker.exceptions.exceptions import (
    BalanceLookupError,
    DeliveryError,
    DuplicateTrackerError,
    InvalidSupplyStateError,
    InvalidThresholdError,
    MissingRequiredConfigError,
    QuotaExceededError,
    RateLimitError,
    RetryExhaustedError,
    RpcError,
    SnapshotCorruptError,
    SnapshotNotFoundError,
    SupplyTrackerError,
)

__all__ = [
    "BalanceLookupError",
    "DeliveryError",
    "DuplicateTrackerError",
    "InvalidSupplyStateError",
    "InvalidThresholdError",
    "MissingRequiredConfigError",
    "QuotaExceededError",
    "RateLimitError",
    "RetryExhaustedError",
    "RpcError",
    "SnapshotCorruptError",
    "SnapshotNotFoundError",
    "SupplyTrackerError",
]
