# -*- coding: utf-8 -*-
"""Unit tests for BalanceAggregator."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from supply_tracker.exceptions import (
    BalanceLookupError,
    InvalidSupplyStateError,
    RetryExhaustedError,
)
from supply_tracker.services.aggregation import BalanceAggregator
from supply_tracker.services.retry import RetryExecutor


def _client(balances: dict[str, int | Exception]) -> Any:
    """Balance client stand-in; an Exception value makes that wallet fail."""

    def _lookup(wallet: str, token: str) -> int:
        value = balances[wallet]
        if isinstance(value, Exception):
            raise value
        return value

    return SimpleNamespace(get_token_balance=AsyncMock(side_effect=_lookup))


def _aggregator(client: Any, max_retries: int = 2) -> BalanceAggregator:
    return BalanceAggregator(
        balance_client=client,
        retry_executor=RetryExecutor(max_retries=max_retries, sleep=AsyncMock()),
    )


async def test_aggregate_sums_scaled_balances_as_percentage(
    token: str,
    D: Callable[[Any], Decimal],
) -> None:
    client = _client({"w1": 500_000_000, "w2": 250_000_000})

    result = await _aggregator(client).aggregate(["w1", "w2"], token, D("1000"), 9)

    assert result == D("0.075")


async def test_aggregate_is_independent_of_wallet_order(
    token: str,
    D: Callable[[Any], Decimal],
) -> None:
    balances: dict[str, int | Exception] = {"a": 1, "b": 333_333_333, "c": 10**20}
    aggregator = _aggregator(_client(balances))

    forward = await aggregator.aggregate(["a", "b", "c"], token, D("777"), 6)
    backward = await aggregator.aggregate(["c", "b", "a"], token, D("777"), 6)

    assert forward == backward
    assert str(forward) == str(backward)


async def test_aggregate_empty_wallets_returns_zero_without_lookups(
    token: str,
    D: Callable[[Any], Decimal],
) -> None:
    client = _client({})

    result = await _aggregator(client).aggregate([], token, D("1000"), 9)

    assert result == 0
    client.get_token_balance.assert_not_awaited()


async def test_failed_wallet_contributes_zero(
    token: str,
    D: Callable[[Any], Decimal],
) -> None:
    client = _client({"w1": 500_000_000, "w2": BalanceLookupError("rpc down")})

    result = await _aggregator(client, max_retries=3).aggregate(["w1", "w2"], token, D("1000"), 9)

    assert result == D("0.05")
    assert client.get_token_balance.await_count == 1 + 3


async def test_all_wallets_failing_raises_retry_exhausted(
    token: str,
    D: Callable[[Any], Decimal],
) -> None:
    client = _client({"w1": BalanceLookupError("x"), "w2": BalanceLookupError("y")})

    with pytest.raises(RetryExhaustedError):
        await _aggregator(client).aggregate(["w1", "w2"], token, D("1000"), 9)


async def test_zero_total_supply_is_invalid_state(token: str, D: Callable[[Any], Decimal]) -> None:
    client = _client({"w1": 1})

    with pytest.raises(InvalidSupplyStateError):
        await _aggregator(client).aggregate(["w1"], token, D("0"), 9)
