"""Fixed-policy decimal arithmetic for balances and supply percentages.

All percentage math goes through this module: a private context with enough
precision to keep integer balances exact, rounding toward zero, and every
stored percentage quantized to FRACTIONAL_DIGITS places. Floats never enter a
comparison; they are converted through their shortest repr first.
"""

from __future__ import annotations

from decimal import (
    ROUND_DOWN,
    Context,
    Decimal,
    DecimalException,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import Any

from supply_tracker.exceptions import InvalidSupplyStateError

FRACTIONAL_DIGITS = 18
"""Fractional digits kept on every stored percentage."""

_QUANTUM = Decimal(1).scaleb(-FRACTIONAL_DIGITS)
_HUNDRED = Decimal(100)
_CONTEXT = Context(
    prec=80,
    rounding=ROUND_DOWN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

ZERO = Decimal(0)


def to_decimal(value: Any) -> Decimal:
    """Convert int/str/Decimal/float to Decimal (floats via str to avoid binary noise).

    Raises:
        ValueError: If value cannot be parsed as a decimal number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a decimal value: {value!r}")
    if isinstance(value, (int, str)):
        raw = value.strip() if isinstance(value, str) else value
        try:
            return Decimal(raw)
        except InvalidOperation as exc:
            raise ValueError(f"Not a decimal value: {value!r}") from exc
    if isinstance(value, float):
        return Decimal(str(value))
    raise ValueError(f"Not a decimal value: {value!r}")


def quantize(value: Decimal) -> Decimal:
    """Truncate value to FRACTIONAL_DIGITS places.

    Raises:
        InvalidSupplyStateError: If value is not finite or too large to quantize.
    """
    if not value.is_finite():
        raise InvalidSupplyStateError(f"Non-finite decimal: {value}")
    try:
        return value.quantize(_QUANTUM, context=_CONTEXT)
    except DecimalException as exc:
        raise InvalidSupplyStateError(f"Decimal out of range: {value}") from exc


def scale_raw_amount(raw: int, decimals: int) -> Decimal:
    """Convert an integer on-chain amount to human units (raw / 10**decimals). Exact."""
    if decimals < 0:
        raise ValueError("decimals must be >= 0")
    return Decimal(raw).scaleb(-decimals, context=_CONTEXT)


def percentage_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return part / whole * 100, truncated to FRACTIONAL_DIGITS places.

    Raises:
        InvalidSupplyStateError: If whole is zero, negative or non-finite, or the
            result is not a finite decimal.
    """
    if not part.is_finite() or not whole.is_finite():
        raise InvalidSupplyStateError(f"Non-finite operands: part={part} whole={whole}")
    if whole <= ZERO:
        raise InvalidSupplyStateError(f"Total supply must be positive, got {whole}")
    try:
        raw = _CONTEXT.divide(_CONTEXT.multiply(part, _HUNDRED), whole)
    except DecimalException as exc:
        raise InvalidSupplyStateError(f"Cannot compute {part} / {whole}") from exc
    return quantize(raw)


def difference(a: Decimal, b: Decimal) -> Decimal:
    """Return a - b computed exactly in the module context."""
    return _CONTEXT.subtract(a, b)


def format_percentage(value: Decimal, places: int = 2) -> str:
    """Render value with a fixed number of places, truncating toward zero."""
    return str(value.quantize(Decimal(1).scaleb(-places), context=_CONTEXT))
