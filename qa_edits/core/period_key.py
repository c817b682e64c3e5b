"""
Period identity - canonical tokens for yearly, quarterly and monthly reporting periods.
"""

from typing import Optional, Tuple

YEARLY_TOKEN = "Y"

EditIdentity = Tuple[str, str, int, str]


def period_token(month: Optional[int] = None, quarter: Optional[int] = None) -> str:
    """
    Return the granularity token of a period: M<month>, Q<quarter> or Y.

    A month wins over a quarter when both are given; 0 and None both mean
    "not set".
    """
    if month:
        return f"M{month}"
    if quarter:
        return f"Q{quarter}"
    return YEARLY_TOKEN


def period_key(year: int, month: Optional[int] = None, quarter: Optional[int] = None) -> str:
    """Identity string of a single period, e.g. 2020|M3 or 2020|Y."""
    return f"{year}|{period_token(month, quarter)}"


def edit_identity(edit) -> EditIdentity:
    """Logical identity of a value edit: (indicator, filter, year, period token)."""
    return (
        edit.indicator_name,
        edit.filter_name,
        edit.year,
        period_token(edit.month, edit.quarter),
    )


def identity_key(edit) -> str:
    """Flat string form of edit_identity, for logs and debugging output."""
    return "|".join(str(part) for part in edit_identity(edit))
