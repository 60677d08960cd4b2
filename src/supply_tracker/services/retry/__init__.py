"""Retry with exponential backoff."""

from supply_tracker.services.retry.retry_executor import RetryExecutor

__all__ = ["RetryExecutor"]
