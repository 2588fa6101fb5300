"""
Display and export formatting for numeric result fields.

Rounding follows what the browser client rendered, so exports stay
byte-identical for identical records:
  - fixed-point values round half away from zero on the exact binary value
  - percentages and mm:ss seconds round half up

Arithmetic runs on exact Decimals in a context wide enough for any finite
double, so very large metric values still render.
"""
import math
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP, localcontext
from typing import Any, Optional

MISSING_DISPLAY = "n/a"
MISSING_EXPORT  = ""

# digits needed to hold the largest finite double (~1.8e308) plus decimals
_WIDE_PREC = 800


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def _round_half_up(x: Decimal) -> int:
    with localcontext() as ctx:
        ctx.prec = _WIDE_PREC
        return int((x + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def format_duration(seconds: Optional[float]) -> str:
    """Render seconds as ``M:SS``; empty string when absent."""
    if not _is_finite_number(seconds):
        return ""
    minutes = math.floor(seconds / 60) if isinstance(seconds, float) else seconds // 60
    with localcontext() as ctx:
        ctx.prec = _WIDE_PREC
        remainder = Decimal(seconds) - minutes * 60
    secs = _round_half_up(remainder)
    # TODO: carry a rounded 60 into the minutes once "3:60" is confirmed as unwanted
    return f"{minutes}:{secs:02d}"


def format_percent(ratio: Optional[float]) -> str:
    """0.523 -> '52%'."""
    if not _is_finite_number(ratio):
        return MISSING_DISPLAY
    scaled = ratio * 100
    if isinstance(scaled, float) and math.isinf(scaled):
        with localcontext() as ctx:
            ctx.prec = _WIDE_PREC
            return f"{_round_half_up(Decimal(ratio) * 100)}%"
    return f"{_round_half_up(Decimal(scaled))}%"


def format_fixed(value: Optional[float], precision: int, missing: str = MISSING_DISPLAY) -> str:
    if not _is_finite_number(value):
        return missing
    if value == 0:
        value = 0  # -0.0 renders unsigned
    exact = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(_WIDE_PREC, exact.adjusted() + precision + 2)
        rounded = exact.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
    return f"{rounded:.{precision}f}"


def escape_csv_field(value: Any) -> str:
    if value is None:
        return ""
    text = str(value)
    escaped = text.replace('"', '""')
    if any(ch in escaped for ch in ('"', ",", "\n")):
        return f'"{escaped}"'
    return escaped
