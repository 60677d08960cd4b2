# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/, sql/, etc."""

from supply_tracker.persistence.repositories.interfaces.tracker_repository import (
    ITrackerRepository,
)

__all__ = ["ITrackerRepository"]
