"""HTTP and RPC clients."""

from supply_tracker.clients.base import IBalanceClient
from supply_tracker.clients.http import AsyncHttpClient
from supply_tracker.clients.solana import SolanaRpcClient

__all__ = [
    "AsyncHttpClient",
    "IBalanceClient",
    "SolanaRpcClient",
]
