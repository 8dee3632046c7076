from __future__ import annotations

import math
from fractions import Fraction

FIXED_POINT_DECIMALS = 18


def scaled_to_float(raw_amount: int, decimals: int) -> float:
    """Convert a raw on-chain integer amount to a float.

    Args:
        raw_amount: Integer amount expressed with ``decimals`` decimal places.
        decimals: Decimal exponent of the token (non-negative).

    Returns:
        ``raw_amount / 10**decimals`` rounded once to the nearest float.

    Notes:
        - The division is done on exact rationals so reserves beyond the
          53-bit float mantissa lose nothing before the final conversion.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    return float(Fraction(int(raw_amount), 10**decimals))


def to_fixed_point_18(value: float) -> str:
    """Encode a USD value as an 18-decimal fixed-point integer string.

    Raises:
        ValueError: If value is negative, NaN or infinite.
    """
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot encode non-finite value {value!r}")
    if value < 0:
        raise ValueError(f"Cannot encode negative value {value!r}")
    return str(round(value * 10**FIXED_POINT_DECIMALS))
