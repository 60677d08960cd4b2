"""Validation and normalization helpers for addresses, wallets and owners."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, cast


def mask_address(addr: str | None) -> str:
    """Return a masked address for logging (e.g. 7xKX...AsU1)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:4]}...{addr[-4:]}"


def normalize_owner(owner: str) -> str:
    """Normalize an owner handle: strip, drop a leading '@', lowercase."""
    return owner.strip().removeprefix("@").lower()


def normalize_wallets(wallets: Iterable[Any]) -> list[str]:
    """Return wallet addresses as an ordered set.

    Accepts plain strings or mappings with an "address" key. Blank or
    unrecognized entries are dropped; the first occurrence of a duplicate wins.
    """
    seen: set[str] = set()
    result: list[str] = []
    for entry in wallets:
        if isinstance(entry, Mapping):
            address = cast(Mapping[str, Any], entry).get("address")
        else:
            address = entry
        if not isinstance(address, str):
            continue
        address = address.strip()
        if not address or address in seen:
            continue
        seen.add(address)
        result.append(address)
    return result
