# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, etc.)."""

from supply_tracker.persistence.repositories.interfaces import ITrackerRepository
from supply_tracker.persistence.repositories.in_memory import InMemoryTrackerRepository

__all__ = [
    "ITrackerRepository",
    "InMemoryTrackerRepository",
]
