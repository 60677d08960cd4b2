"""Collaborator interface for balance lookups."""

from __future__ import annotations

from typing import Protocol


class IBalanceClient(Protocol):
    """Given a wallet and a token, return the raw integer balance."""

    async def get_token_balance(self, wallet_address: str, token_address: str) -> int:
        """Return the unscaled balance; raise BalanceLookupError on failure."""
        ...
