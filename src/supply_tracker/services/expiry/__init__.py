"""Tracker expiry."""

from supply_tracker.services.expiry.expiry_sweeper import ExpirySweeper

__all__ = ["ExpirySweeper"]
