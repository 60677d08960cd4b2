"""Supply tracker: watches what share of a token's supply a wallet cohort holds."""

from supply_tracker.config import get_settings
from supply_tracker.DI import Container
from supply_tracker.models import Tracker, TrackerSummary, TrackType
from supply_tracker.services import SupplyTrackingRunner, SupplyTrackingService

__version__ = "0.0.1"
__all__ = [
    "Container",
    "SupplyTrackingRunner",
    "SupplyTrackingService",
    "Tracker",
    "TrackerSummary",
    "TrackType",
    "get_settings",
]
