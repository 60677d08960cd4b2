"""Logging setup (structlog + Logfire)."""

from supply_tracker.logging.config import configure_logging

__all__ = ["configure_logging"]
