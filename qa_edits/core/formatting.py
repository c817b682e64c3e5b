"""
Number and period formatting for dashboard labels, tooltips and chart axes.
"""

from decimal import ROUND_HALF_UP, Decimal
from numbers import Number
from typing import Optional

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# (threshold, suffix), largest first
_COMPACT_SCALES = [(1e9, "B"), (1e6, "M"), (1e3, "K")]


def _round_half_up(value: float, places: str) -> str:
    # Halves round away from zero (1.25 -> 1.3), not to even
    return format(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP), "f")


def format_number(num: float) -> str:
    """
    Compact form of a large number.

    >>> format_number(1500000)
    '1.5M'
    >>> format_number(-2500)
    '-2.5K'
    """
    if num == 0:
        return "0"

    abs_num = abs(num)
    sign = "-" if num < 0 else ""

    for threshold, suffix in _COMPACT_SCALES:
        if abs_num >= threshold:
            return f"{sign}{_round_half_up(abs_num / threshold, '0.1')}{suffix}"

    return f"{sign}{_round_half_up(abs_num, '1')}"


def format_number_full(num) -> str:
    """Comma-grouped number for tooltips, at most three decimals."""
    if isinstance(num, bool) or not isinstance(num, Number):
        return str(num)
    text = f"{num:,.3f}"
    return text.rstrip("0").rstrip(".")


def format_y_axis_value(num: float) -> str:
    return format_number(num)


def format_period_label(year: int, month: Optional[int] = None, quarter: Optional[int] = None) -> str:
    """Short period label: 2020-03, 2020-Q2 or 2020."""
    if month:
        return f"{year}-{month:02d}"
    if quarter:
        return f"{year}-Q{quarter}"
    return f"{year}"


def format_period_full_label(year: int, month: Optional[int] = None, quarter: Optional[int] = None) -> str:
    """Long period label: March 2020, Q2 2020 or 2020."""
    if month:
        if not 1 <= month <= 12:
            return format_period_label(year, month, quarter)
        return f"{MONTH_NAMES[month - 1]} {year}"
    if quarter:
        return f"Q{quarter} {year}"
    return f"{year}"


def create_period_key(year: int, month: Optional[int] = None, quarter: Optional[int] = None) -> str:
    """
    Display key of a period, used to line up chart points.

    Independent of the identity token in period_key.py, but month/quarter
    precedence is the same, so both split periods into the same classes.
    """
    if month:
        return f"{year}-{month:02d}"
    if quarter:
        return f"{year}-Q{quarter}"
    return f"{year}"
