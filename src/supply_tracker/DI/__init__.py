"""Dependency injection."""

from supply_tracker.DI.container import Container

__all__ = ["Container"]
