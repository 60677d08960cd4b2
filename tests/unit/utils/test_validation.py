# -*- coding: utf-8 -*-
"""Unit tests for validation helpers."""

from __future__ import annotations

from supply_tracker.utils.validation import mask_address, normalize_owner, normalize_wallets


def test_mask_address_keeps_head_and_tail() -> None:
    assert mask_address("7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU") == "7xKX...gAsU"


def test_mask_address_hides_short_or_empty_values() -> None:
    assert mask_address("short") == "***"
    assert mask_address(None) == "***"


def test_normalize_owner_strips_at_and_lowercases() -> None:
    assert normalize_owner("  @Alice ") == "alice"
    assert normalize_owner("bob") == "bob"


def test_normalize_wallets_is_an_ordered_set() -> None:
    result = normalize_wallets(["w2", " w1 ", "w2", "", "w3", "w1"])
    assert result == ["w2", "w1", "w3"]


def test_normalize_wallets_accepts_address_mappings_and_skips_garbage() -> None:
    result = normalize_wallets([{"address": "w1"}, {"name": "x"}, None, 12, "w2"])
    assert result == ["w1", "w2"]
