# -*- coding: utf-8 -*-
"""Exponential-backoff retry wrapper for fallible async operations."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from structlog.contextvars import bound_contextvars

from supply_tracker.exceptions import RetryExhaustedError

T = TypeVar("T")


class RetryExecutor:
    """Runs an async operation up to max_retries times with exponential backoff.

    Attempt n (0-based) that fails waits initial_delay * 2**n (+ optional jitter)
    before the next one. Each attempt is bounded by timeout_seconds, and a timeout
    counts as a failed attempt. The last failure is raised as RetryExhaustedError.
    """

    def __init__(
        self,
        max_retries: int = 5,
        initial_delay: float = 1.0,
        *,
        timeout_seconds: float | None = None,
        jitter_seconds: float = 0.0,
        retry_on: tuple[type[Exception], ...] = (Exception,),
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            max_retries: Total attempts (>= 1).
            initial_delay: Base delay in seconds.
            timeout_seconds: Per-attempt timeout; None disables it.
            jitter_seconds: Upper bound of a uniform random delay added to each backoff.
            retry_on: Exception types that trigger a retry; others propagate immediately.
            sleep: Awaitable sleep (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        self._max_retries = max_retries
        self._initial_delay = initial_delay
        self._timeout = timeout_seconds
        self._jitter = jitter_seconds
        self._retry_on = retry_on
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def backoff_delay(self, attempt: int) -> float:
        """Delay after failed attempt `attempt` (0-based)."""
        delay = self._initial_delay * (2**attempt)
        if self._jitter > 0:
            delay += random.uniform(0.0, self._jitter)
        return delay

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        description: str = "operation",
    ) -> T:
        """Run operation until it succeeds or the retry budget is spent.

        Raises:
            RetryExhaustedError: If every attempt failed; chained to the last error.
        """
        last_error: Exception | None = None
        with bound_contextvars(retry_operation=description, retry_max_retries=self._max_retries):
            for attempt in range(self._max_retries):
                try:
                    if self._timeout is None:
                        return await operation()
                    return await asyncio.wait_for(operation(), timeout=self._timeout)
                except self._retry_on as e:
                    last_error = e
                    if attempt == self._max_retries - 1:
                        break
                    delay = self.backoff_delay(attempt)
                    self._logger.warning(
                        "retry_attempt_failed",
                        retry_attempt=attempt + 1,
                        retry_delay_seconds=delay,
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    await self._sleep(delay)

            self._logger.debug(
                "retry_exhausted",
                retry_attempts=self._max_retries,
                error_type=type(last_error).__name__ if last_error else None,
                error_message=str(last_error) if last_error else None,
            )
        raise RetryExhaustedError(
            f"{description} failed after {self._max_retries} attempts: {last_error}",
            attempts=self._max_retries,
            last_error=last_error,
        ) from last_error
