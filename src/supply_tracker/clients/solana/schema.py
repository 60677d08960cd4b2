"""TypedDicts for the Solana JSON-RPC getTokenAccountsByOwner response (jsonParsed)."""

from __future__ import annotations

from typing import Any, TypedDict


class TokenAccountSchema(TypedDict, total=False):
    """One entry of result.value: account.data.parsed.info.tokenAmount.amount holds the raw balance."""

    pubkey: str
    account: dict[str, Any]


class TokenAccountsResultSchema(TypedDict, total=False):
    context: dict[str, Any]
    value: list[TokenAccountSchema]
