# -*- coding: utf-8 -*-
"""Utility modules."""

from supply_tracker.utils.decimal_math import (
    FRACTIONAL_DIGITS,
    difference,
    format_percentage,
    percentage_of,
    quantize,
    scale_raw_amount,
    to_decimal,
)
from supply_tracker.utils.validation import (
    mask_address,
    normalize_owner,
    normalize_wallets,
)

__all__ = [
    "FRACTIONAL_DIGITS",
    "difference",
    "format_percentage",
    "mask_address",
    "normalize_owner",
    "normalize_wallets",
    "percentage_of",
    "quantize",
    "scale_raw_amount",
    "to_decimal",
]
