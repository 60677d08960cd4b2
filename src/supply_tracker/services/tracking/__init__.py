"""Tracking facade and process runner."""

from supply_tracker.services.tracking.supply_tracking_service import SupplyTrackingService
from supply_tracker.services.tracking.tracking_runner import SupplyTrackingRunner

__all__ = ["SupplyTrackingRunner", "SupplyTrackingService"]
