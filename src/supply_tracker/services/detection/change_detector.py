# -*- coding: utf-8 -*-
"""ChangeDetector: compares a fresh percentage with a tracker's baseline and notifies.

The decision is evaluated inside TrackerRegistry.update_if_present(), against the
state stored at write time; the notification is enqueued only if that write
happened, so a tracker stopped during its tick is neither rewritten nor notified.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog

from supply_tracker.events.trackers.tracker_events import SupplyChangeDetectedEvent
from supply_tracker.models.tracker import Tracker
from supply_tracker.notifications.types import NotificationMessage
from supply_tracker.utils.decimal_math import ZERO, difference, format_percentage

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from supply_tracker.notifications.notification_manager import NotificationService
    from supply_tracker.services.registry import TrackerRegistry


@dataclass(frozen=True, slots=True)
class ChangeDecision:
    """Outcome of comparing one observation with a tracker's baseline."""

    tracker: Tracker
    """Tracker after the observation (baseline rebased when significant)."""
    previous_baseline: Decimal
    new_percentage: Decimal
    delta: Decimal
    significant: bool


def evaluate_change(tracker: Tracker, new_percentage: Decimal) -> ChangeDecision:
    """Pure decision: |new - baseline| >= threshold means notify and rebase."""
    delta = difference(new_percentage, tracker.baseline_percentage)
    significant = delta.copy_abs() >= tracker.significant_change_threshold
    return ChangeDecision(
        tracker=tracker.with_observation(new_percentage, rebase=significant),
        previous_baseline=tracker.baseline_percentage,
        new_percentage=new_percentage,
        delta=delta,
        significant=significant,
    )


def format_change_message(tracker: Tracker, decision: ChangeDecision) -> str:
    """Human text for a significant change (percentages truncated to 2 places)."""
    label = tracker.track_type.label
    up = decision.delta > ZERO
    sign = "+" if up else ""
    return (
        f"Significant change detected in {label.lower()} supply for {tracker.ticker}\n\n"
        f"{label} now hold {format_percentage(decision.new_percentage)}% "
        f"(previously {format_percentage(decision.previous_baseline)}%)\n\n"
        f"{'📈' if up else '📉'} {sign}{format_percentage(decision.delta)}%"
    )


class ChangeDetector:
    """Applies an observation to the registry and notifies the owner on significant moves."""

    def __init__(
        self,
        notification_service: "NotificationService",
        event_bus: Optional[Any] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the detector.

        Args:
            notification_service: Sink for change notices.
            event_bus: Optional; if set, emits SupplyChangeDetectedEvent.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._notifications = notification_service
        self._event_bus: Optional["EventBus"] = event_bus
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def apply(
        self,
        registry: "TrackerRegistry",
        owner: str,
        tracker_id: str,
        new_percentage: Decimal,
    ) -> ChangeDecision | None:
        """Record new_percentage on the stored tracker; None if the tracker is gone."""
        decision: ChangeDecision | None = None

        def _change(current: Tracker) -> Tracker:
            nonlocal decision
            decision = evaluate_change(current, new_percentage)
            return decision.tracker

        stored = await registry.update_if_present(owner, tracker_id, _change)
        if stored is None or decision is None:
            self._logger.debug(
                "change_detection_tracker_gone",
                owner=owner,
                tracker_id=tracker_id,
            )
            return None

        if decision.significant:
            self._notify(stored, decision)
        return decision

    def _notify(self, tracker: Tracker, decision: ChangeDecision) -> None:
        up = decision.delta > ZERO
        self._logger.info(
            "supply_change_detected",
            owner=tracker.owner,
            tracker_id=tracker.tracker_id,
            track_type=tracker.track_type.value,
            previous_percentage=str(decision.previous_baseline),
            new_percentage=str(decision.new_percentage),
            delta=str(decision.delta),
        )
        self._notifications.notify(
            NotificationMessage(
                event_type="supply_change_up" if up else "supply_change_down",
                message=format_change_message(tracker, decision),
                destination=tracker.destination,
                payload={
                    "owner": tracker.owner,
                    "tracker_id": tracker.tracker_id,
                    "ticker": tracker.ticker,
                    "track_type": tracker.track_type.value,
                    "previous_percentage": str(decision.previous_baseline),
                    "new_percentage": str(decision.new_percentage),
                    "delta": str(decision.delta),
                },
            )
        )
        if self._event_bus is not None:
            self._event_bus.dispatch(
                SupplyChangeDetectedEvent(
                    owner=tracker.owner,
                    tracker_id=tracker.tracker_id,
                    previous_percentage=decision.previous_baseline,
                    new_percentage=decision.new_percentage,
                )
            )
