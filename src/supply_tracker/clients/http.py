# -*- coding: utf-8 -*-
"""Async HTTP client for JSON-RPC calls with rate-limit detection."""

from __future__ import annotations

import asyncio
import uuid
import aiohttp
import structlog
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from supply_tracker.config import Settings
from supply_tracker.exceptions import BalanceLookupError, RateLimitError


class AsyncHttpClient:
    """Async HTTP client issuing one attempt per call.

    Retrying is left to the caller (RetryExecutor); this client only maps
    transport failures to BalanceLookupError and HTTP 429 to RateLimitError.
    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (uses settings.api.timeout_seconds).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def post(
        self,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform a POST request with a JSON body and return parsed JSON.

        Raises:
            RateLimitError: If the server answers 429.
            BalanceLookupError: On any other HTTP or transport failure.
        """
        request_id = uuid.uuid4().hex[:12]
        with bound_contextvars(http_url=url, http_request_id=request_id):
            try:
                session = await self._get_session()
                async with session.post(url, json=json or {}) as response:
                    if response.status == 429:
                        retry_after: Optional[float] = None
                        header = response.headers.get("Retry-After")
                        if header:
                            try:
                                retry_after = float(header)
                            except ValueError:
                                pass
                        self._logger.warning(
                            "http_post_rate_limited",
                            http_status_code=429,
                            http_retry_after_seconds=retry_after,
                        )
                        raise RateLimitError(url=url, retry_after=retry_after)
                    response.raise_for_status()
                    return await response.json()
            except aiohttp.ClientResponseError as e:
                self._logger.debug(
                    "http_post_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                    http_status_code=e.status,
                )
                raise BalanceLookupError(f"POST {url} failed with HTTP {e.status}", cause=e) from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                self._logger.debug(
                    "http_post_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise BalanceLookupError(f"POST {url} failed: {type(e).__name__}", cause=e) from e
