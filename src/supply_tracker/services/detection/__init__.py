"""Significant-change detection."""

from supply_tracker.services.detection.change_detector import (
    ChangeDecision,
    ChangeDetector,
    evaluate_change,
    format_change_message,
)

__all__ = [
    "ChangeDecision",
    "ChangeDetector",
    "evaluate_change",
    "format_change_message",
]
