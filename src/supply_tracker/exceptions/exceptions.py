"""Custom exceptions for supply tracking."""

from __future__ import annotations


class SupplyTrackerError(Exception):
    """Base exception for supply-tracker errors."""

    pass


class MissingRequiredConfigError(SupplyTrackerError):
    """Raised when a required configuration value is missing."""

    pass


# ---------------------------------------------------------------------------
# User-input errors (surfaced to the caller, never retried)
# ---------------------------------------------------------------------------


class DuplicateTrackerError(SupplyTrackerError):
    """Raised when an owner already has a tracker with the same id."""

    def __init__(self, owner: str, tracker_id: str) -> None:
        super().__init__(f"Already tracking {tracker_id} for {owner}")
        self.owner = owner
        self.tracker_id = tracker_id


class QuotaExceededError(SupplyTrackerError):
    """Raised when an owner already runs as many trackers as their role allows."""

    def __init__(self, owner: str, quota: int) -> None:
        super().__init__(
            f"Maximum number of simultaneous trackings reached ({quota}). "
            "Stop an existing tracking before starting a new one."
        )
        self.owner = owner
        self.quota = quota


class InvalidThresholdError(SupplyTrackerError, ValueError):
    """Raised when a significant-change threshold is out of range."""

    pass


# ---------------------------------------------------------------------------
# Tick-level errors (logged, tracker stays armed)
# ---------------------------------------------------------------------------


class BalanceLookupError(SupplyTrackerError):
    """Raised when a wallet balance cannot be read from the upstream source."""

    def __init__(
        self,
        message: str,
        *,
        wallet: str | None = None,
        token_address: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.wallet = wallet
        self.token_address = token_address
        self.cause = cause


class RpcError(BalanceLookupError):
    """Raised when the JSON-RPC endpoint answers with an error object."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.url = url


class RateLimitError(BalanceLookupError):
    """Raised when the RPC endpoint returns HTTP 429 (Too Many Requests)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded (429)",
        *,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.retry_after = retry_after


class RetryExhaustedError(SupplyTrackerError):
    """Raised when an operation failed on every attempt of the retry budget."""

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        last_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class InvalidSupplyStateError(SupplyTrackerError):
    """Raised when a supply percentage cannot be computed as a finite decimal."""

    pass


class DeliveryError(SupplyTrackerError):
    """Raised when a notification cannot be delivered."""

    def __init__(self, message: str, *, destination: str | None = None) -> None:
        super().__init__(message)
        self.destination = destination


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class SnapshotNotFoundError(SupplyTrackerError):
    """Raised when no snapshot has been written yet."""

    pass


class SnapshotCorruptError(SupplyTrackerError):
    """Raised when a stored snapshot cannot be decoded."""

    pass
