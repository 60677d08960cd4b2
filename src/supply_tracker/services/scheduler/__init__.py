"""Per-tracker polling."""

from supply_tracker.services.scheduler.polling_scheduler import PollingScheduler

__all__ = ["PollingScheduler"]
