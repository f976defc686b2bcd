from __future__ import annotations

import math
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import Callable


ValueFormatter = Callable[[float], str]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going towards +infinity.

    Works on the shortest decimal repr of `value`, so binary noise just below .5
    does not round up.
    """

    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value: {value}")
    # Decimal's HALF_UP rounds away from zero; negative ties go towards zero instead.
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return int(Decimal(repr(float(value))).to_integral_value(rounding=rounding))


def format_plain(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    if float(value).is_integer():
        return f"{int(value):,}"
    out = format(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP), "f")
    out = out.rstrip("0").rstrip(".")
    return "0" if out == "-0" else out


def format_integer(value: float) -> str:
    return str(round_half_up(value))


def format_compact(value: float) -> str:
    if value >= 1_000_000:
        return f"{_fixed(value / 1_000_000, 1)}M"
    if value >= 1_000:
        return f"{_fixed(value / 1_000, 1)}K"
    return format_plain(value)


def format_currency(value: float) -> str:
    if value >= 1_000_000:
        return f"${_fixed(value / 1_000_000, 2)}M"
    if value >= 1_000:
        return f"${_fixed(value / 1_000, 1)}K"
    return f"${format_plain(value)}"


def suffix_formatter(suffix: str, base: ValueFormatter = format_plain) -> ValueFormatter:
    def _format(value: float) -> str:
        return f"{base(value)}{suffix}"

    return _format


def _fixed(value: float, decimals: int) -> str:
    quant = Decimal("1").scaleb(-decimals)
    return format(Decimal(str(value)).quantize(quant, rounding=ROUND_HALF_UP), "f")
