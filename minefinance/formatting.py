# minefinance/formatting.py
"""
Display helpers. These only build strings; stored values keep full precision.

Fixed-point rounding follows the exact binary value with halves rounded away
from zero, so 0.125 -> "0.13" and -0.125 -> "-0.13".
"""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from minefinance.types import NumberOrUnset

UNITS = ("k", "M", "B")
STANDARD_DECIMALS = 2
HIGH_PRECISION_DECIMALS = 6


def _value(value: NumberOrUnset) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    return float(value)


def _quantize(value: float, decimals: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 400  # enough for any finite double at 6+ decimals
        return Decimal(value).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def to_fixed(value: float, decimals: int = STANDARD_DECIMALS) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        value = 0.0  # drop the sign of -0.0
    return f"{_quantize(value, decimals):f}"


def normalize_unit(unit: str) -> str:
    u = (unit or "").strip()
    if u.startswith("$"):
        u = u[1:]
    if u not in UNITS:
        raise ValueError(f"unit must be one of {UNITS}, got {unit!r}")
    return u


def format_currency_short(
    value: NumberOrUnset, unit: str = "M", decimals: int = STANDARD_DECIMALS
) -> str:
    """'$' + fixed-point value + unit suffix, e.g. $15.00M or $-13.49k. No grouping."""
    return f"${to_fixed(_value(value), decimals)}{normalize_unit(unit)}"


def format_npv_precise(value: NumberOrUnset, unit: str = "M") -> str:
    """High-precision NPV string offered for copying."""
    return format_currency_short(value, unit, HIGH_PRECISION_DECIMALS)


def format_currency(value: NumberOrUnset) -> str:
    """Full USD amount with grouping; `value` is in millions."""
    v = _value(value) * 1_000_000
    if not math.isfinite(v):
        return to_fixed(v)
    q = _quantize(v, STANDARD_DECIMALS)
    sign = "-" if math.copysign(1.0, v) < 0 else ""
    return f"{sign}${abs(q):,.2f}"


def format_ratio(value: float) -> str:
    return f"{to_fixed(value, STANDARD_DECIMALS)}x"
