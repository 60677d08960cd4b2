# -*- coding: utf-8 -*-
"""BalanceAggregator: sums a wallet cohort's holdings as a percentage of total supply."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.contextvars import bound_contextvars

from supply_tracker.exceptions import RetryExhaustedError
from supply_tracker.utils.decimal_math import ZERO, percentage_of, scale_raw_amount
from supply_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from supply_tracker.clients.base import IBalanceClient
    from supply_tracker.services.retry import RetryExecutor


class BalanceAggregator:
    """Fetches every wallet's balance concurrently and returns sum / total_supply * 100.

    Each lookup runs through the RetryExecutor. A wallet whose lookup still fails
    contributes 0 and is logged; if every wallet of a non-empty cohort fails the
    aggregation raises RetryExhaustedError instead of reporting a false 0%.
    Raw balances are summed as integers before scaling, so the result does not
    depend on wallet order or completion order.
    """

    def __init__(
        self,
        balance_client: "IBalanceClient",
        retry_executor: "RetryExecutor",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._client = balance_client
        self._retry = retry_executor
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _fetch(self, wallet: str, token_address: str) -> int:
        return await self._retry.execute(
            lambda: self._client.get_token_balance(wallet, token_address),
            description=f"get_token_balance {mask_address(wallet)}",
        )

    async def aggregate(
        self,
        wallets: Sequence[str],
        token_address: str,
        total_supply: Decimal,
        decimals: int,
    ) -> Decimal:
        """Return the cohort's share of total_supply in percent (18 fractional digits).

        Raises:
            InvalidSupplyStateError: If total_supply is not positive or the result is not finite.
            RetryExhaustedError: If every wallet lookup failed.
        """
        with bound_contextvars(token_masked=mask_address(token_address)):
            if not wallets:
                self._logger.warning("aggregation_no_wallets")
                return ZERO

            results = await asyncio.gather(
                *(self._fetch(wallet, token_address) for wallet in wallets),
                return_exceptions=True,
            )

            total_raw = 0
            failures = 0
            last_error: Exception | None = None
            for wallet, result in zip(wallets, results):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    failures += 1
                    last_error = result
                    self._logger.warning(
                        "aggregation_wallet_failed",
                        wallet_masked=mask_address(wallet),
                        error_type=type(result).__name__,
                        error_message=str(result),
                    )
                    continue
                total_raw += result

            if failures == len(wallets):
                raise RetryExhaustedError(
                    f"All {failures} wallet lookups failed",
                    attempts=self._retry.max_retries,
                    last_error=last_error,
                ) from last_error

            percentage = percentage_of(scale_raw_amount(total_raw, decimals), total_supply)
            self._logger.debug(
                "aggregation_complete",
                wallets_count=len(wallets),
                wallets_failed=failures,
                supply_percentage=str(percentage),
            )
            return percentage
