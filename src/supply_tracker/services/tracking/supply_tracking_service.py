# -*- coding: utf-8 -*-
"""SupplyTrackingService: start, stop and list trackers on behalf of the front-end."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog

from supply_tracker.events.trackers.tracker_events import (
    TrackerStartedEvent,
    TrackerStoppedEvent,
)
from supply_tracker.exceptions import InvalidThresholdError
from supply_tracker.models.tracker import TrackType, Tracker, TrackerSummary
from supply_tracker.utils.decimal_math import to_decimal
from supply_tracker.utils.validation import mask_address, normalize_owner, normalize_wallets

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from supply_tracker.config import Settings
    from supply_tracker.services.registry import TrackerRegistry
    from supply_tracker.services.scheduler import PollingScheduler


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SupplyTrackingService:
    """Facade over TrackerRegistry and PollingScheduler.

    Owners are normalized (leading '@' stripped, lowercased) before any lookup,
    so "@Alice" and "alice" address the same trackers.
    """

    def __init__(
        self,
        registry: "TrackerRegistry",
        scheduler: "PollingScheduler",
        settings: "Settings",
        event_bus: Optional[Any] = None,
        *,
        now: Callable[[], datetime] = _utc_now,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the service.

        Args:
            registry: Live tracker store (quota and uniqueness checks).
            scheduler: Armed for each new tracker, cancelled on stop.
            settings: Application settings (uses settings.tracker threshold bounds).
            event_bus: Optional; emits TrackerStartedEvent / TrackerStoppedEvent.
            now: Clock (injected for tests).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._registry = registry
        self._scheduler = scheduler
        self._min_threshold = to_decimal(settings.tracker.min_threshold)
        self._max_threshold = to_decimal(settings.tracker.max_threshold)
        self._event_bus: Optional["EventBus"] = event_bus
        self._now = now
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _validate_threshold(self, threshold: Any) -> Decimal:
        try:
            value = to_decimal(threshold)
        except ValueError as e:
            raise InvalidThresholdError(f"Invalid threshold: {threshold!r}") from e
        if not value.is_finite() or not (self._min_threshold <= value <= self._max_threshold):
            raise InvalidThresholdError(
                f"Threshold must be between {self._min_threshold} and {self._max_threshold}, "
                f"got {threshold}"
            )
        return value

    async def start_tracking(
        self,
        owner: str,
        destination: str,
        token_address: str,
        wallets: Iterable[Any],
        track_type: TrackType | str,
        total_supply: Any,
        decimals: int,
        ticker: str,
        initial_percentage: Any,
        threshold: Any,
    ) -> Tracker:
        """Create, register and arm a tracker.

        Raises:
            InvalidThresholdError: If threshold is outside [min_threshold, max_threshold].
            QuotaExceededError: If the owner's role quota is reached.
            DuplicateTrackerError: If the owner already tracks this token and cohort.
            ValueError: If owner or token_address is blank, or a number cannot be parsed.
        """
        owner_key = normalize_owner(owner)
        if not owner_key:
            raise ValueError("owner must be non-empty")
        threshold_d = self._validate_threshold(threshold)
        wallet_list = normalize_wallets(wallets)
        track_type = TrackType(track_type)
        if not wallet_list:
            self._logger.warning(
                "tracking_started_without_wallets",
                owner=owner_key,
                token_masked=mask_address(token_address),
                track_type=track_type.value,
            )

        tracker = Tracker.create(
            owner=owner_key,
            destination=destination,
            token_address=token_address,
            wallets=wallet_list,
            track_type=track_type,
            total_supply=total_supply,
            decimals=decimals,
            ticker=ticker,
            initial_percentage=initial_percentage,
            threshold=threshold_d,
            created_at=self._now(),
        )
        await self._registry.register(tracker)
        self._scheduler.arm(tracker)
        self._logger.info(
            "tracking_started",
            owner=owner_key,
            tracker_id=tracker.tracker_id,
            track_type=track_type.value,
            wallets_count=len(wallet_list),
            threshold=str(threshold_d),
        )
        if self._event_bus is not None:
            self._event_bus.dispatch(
                TrackerStartedEvent(
                    owner=owner_key,
                    tracker_id=tracker.tracker_id,
                    track_type=track_type.value,
                )
            )
        return tracker

    async def stop_tracking(self, owner: str, tracker_id: str) -> bool:
        """Stop and remove a tracker. Return False if it did not exist."""
        owner_key = normalize_owner(owner)
        removed = await self._registry.remove(owner_key, tracker_id)
        if removed is None:
            self._logger.debug("tracking_stop_not_found", owner=owner_key, tracker_id=tracker_id)
            return False
        self._scheduler.cancel(owner_key, tracker_id)
        self._logger.info("tracking_stopped", owner=owner_key, tracker_id=tracker_id)
        if self._event_bus is not None:
            self._event_bus.dispatch(TrackerStoppedEvent(owner=owner_key, tracker_id=tracker_id))
        return True

    async def list_trackers(self, owner: str) -> list[TrackerSummary]:
        """Return the owner's trackers (empty list if none)."""
        trackers = await self._registry.list_by_owner(normalize_owner(owner))
        return [TrackerSummary.from_tracker(t) for t in trackers]
