"""Numeric coercion for user-supplied amounts."""

import math
from typing import Any, Optional


def to_number(value: Any) -> Optional[float]:
    """
    Coerce an amount to a finite float.

    Numbers and numeric strings ("150", " 12.5 ") are accepted. Booleans,
    NaN, infinities and anything else yield None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def to_positive_number(value: Any) -> Optional[float]:
    """Like to_number, but also None for zero and negatives."""
    number = to_number(value)
    if number is None or number <= 0:
        return None
    return number
