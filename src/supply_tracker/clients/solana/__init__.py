"""Solana JSON-RPC client."""

from supply_tracker.clients.solana.rpc_client import SolanaRpcClient
from supply_tracker.clients.solana.schema import TokenAccountSchema, TokenAccountsResultSchema

__all__ = ["SolanaRpcClient", "TokenAccountSchema", "TokenAccountsResultSchema"]
