"""
Numeric normalization for monetary values and tax percentages.

Every amount the engine produces passes through normalize() so that
rounding happens in exactly one place. Arithmetic between normalized
values is done on to_decimal() operands so exact decimal ties survive
until they are rounded.
"""
import math
from decimal import Decimal, ROUND_HALF_DOWN, ROUND_HALF_UP, localcontext
from typing import Any


def _to_float(value: Any) -> float:
    """Parse a number-like value, returning 0.0 for anything unusable."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if value == '':
            return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(parsed):
        return 0.0
    return parsed


def to_decimal(value: Any) -> Decimal:
    """
    Exact decimal form of a number-like value.

    Floats are read through their shortest repr, so 0.1 becomes
    Decimal('0.1'). Unusable input becomes Decimal('0').
    """
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    return Decimal(repr(_to_float(value)))


def normalize(value: Any, precision: int = 2) -> float:
    """
    Round a number-like value to `precision` fractional digits.

    None, empty strings, booleans, non-numeric input and non-finite floats
    all become 0. Ties round toward positive infinity. The value's shortest
    repr is rounded rather than its binary expansion, so 1.005 becomes 1.01.
    Negative values are rounded but not clamped.
    """
    exact = to_decimal(value)
    precision = int(precision)
    quantum = Decimal(1).scaleb(-precision)
    rounding = ROUND_HALF_UP if exact >= 0 else ROUND_HALF_DOWN
    with localcontext() as ctx:
        # quantize needs every integer digit plus the kept fraction digits
        ctx.prec = max(ctx.prec, exact.adjusted() + precision + 2)
        rounded = float(exact.quantize(quantum, rounding=rounding))
    # Avoid handing out -0.0
    return rounded + 0.0
