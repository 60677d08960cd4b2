"""Solana JSON-RPC client for SPL token balance reads."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, cast

import structlog

from supply_tracker.clients.solana.schema import TokenAccountSchema, TokenAccountsResultSchema
from supply_tracker.exceptions import BalanceLookupError, RpcError
from supply_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from supply_tracker.clients.http import AsyncHttpClient
    from supply_tracker.config import Settings


def _raw_amount(account: TokenAccountSchema) -> int:
    """Extract tokenAmount.amount from a jsonParsed token account (0 if absent)."""
    info = (
        account.get("account", {})
        .get("data", {})
        .get("parsed", {})
        .get("info", {})
    )
    amount = cast(dict[str, Any], info).get("tokenAmount", {}).get("amount")
    if amount is None:
        return 0
    try:
        return int(amount)
    except (TypeError, ValueError) as e:
        raise BalanceLookupError(f"Unparseable token amount: {amount!r}", cause=e) from e


class SolanaRpcClient:
    """Reads raw SPL token balances through getTokenAccountsByOwner."""

    def __init__(
        self,
        http_client: AsyncHttpClient,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the RPC client.

        Args:
            http_client: HTTP client for POST requests (JSON-RPC).
            settings: Configuration (uses settings.api.solana_rpc_url).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _rpc_url(self) -> str:
        return self._settings.api.solana_rpc_url.rstrip("/")

    async def call(self, method: str, params: list[Any]) -> Any:
        """Perform a JSON-RPC call and return its result.

        Raises:
            RpcError: If the response carries an error object or is malformed.
            BalanceLookupError: If the HTTP request fails.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": "supply-tracker",
            "method": method,
            "params": params,
        }
        response = await self._http.post(self._rpc_url(), json=payload)
        if not isinstance(response, dict):
            raise RpcError(f"Unexpected RPC response type: {type(response).__name__}", url=self._rpc_url())
        resp_dict = cast(dict[str, Any], response)
        if "error" in resp_dict:
            err = resp_dict["error"]
            if isinstance(err, dict):
                err_d = cast(dict[str, Any], err)
                raise RpcError(
                    f"RPC error: {err_d.get('message', err_d)}",
                    code=err_d.get("code"),
                    url=self._rpc_url(),
                )
            raise RpcError(f"RPC error: {err}", url=self._rpc_url())
        return resp_dict.get("result")

    async def get_token_balance(self, wallet_address: str, token_address: str) -> int:
        """Return the raw (unscaled) balance of token_address held by wallet_address.

        Sums every token account the wallet owns for the mint; no account means 0.
        """
        try:
            result = await self.call(
                "getTokenAccountsByOwner",
                [wallet_address, {"mint": token_address}, {"encoding": "jsonParsed"}],
            )
        except BalanceLookupError as e:
            e.wallet = wallet_address
            e.token_address = token_address
            raise
        accounts = cast(TokenAccountsResultSchema, result or {}).get("value") or []
        if not accounts:
            self._logger.debug(
                "solana_no_token_account",
                wallet_masked=mask_address(wallet_address),
                token_masked=mask_address(token_address),
            )
            return 0
        return sum(_raw_amount(account) for account in accounts)
