# -*- coding: utf-8 -*-
"""Services: tracking facade, registry, polling, detection, persistence, expiry."""

from supply_tracker.services.access import SettingsRoleProvider, quota_for_role
from supply_tracker.services.aggregation import BalanceAggregator
from supply_tracker.services.detection import ChangeDetector
from supply_tracker.services.expiry import ExpirySweeper
from supply_tracker.services.persistence import PersistenceManager
from supply_tracker.services.registry import TrackerRegistry
from supply_tracker.services.retry import RetryExecutor
from supply_tracker.services.scheduler import PollingScheduler
from supply_tracker.services.tracking import SupplyTrackingRunner, SupplyTrackingService

__all__ = [
    "BalanceAggregator",
    "ChangeDetector",
    "ExpirySweeper",
    "PersistenceManager",
    "PollingScheduler",
    "RetryExecutor",
    "SettingsRoleProvider",
    "SupplyTrackingRunner",
    "SupplyTrackingService",
    "TrackerRegistry",
    "quota_for_role",
]
