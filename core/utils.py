from __future__ import annotations

import math
import numbers
from datetime import date
from typing import Iterable, Optional, Union

import pandas as pd
from dateutil.relativedelta import relativedelta

from .errors import InvalidInput

DateLike = Union[str, date, pd.Timestamp]


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or `default` when the denominator is zero or not finite."""
    if denominator == 0 or not math.isfinite(denominator):
        return default
    return numerator / denominator


def to_timestamp(value: Optional[DateLike]) -> Optional[pd.Timestamp]:
    """Parse a date-ish value; unparseable input becomes None."""
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    return pd.Timestamp(ts)


def years_between(start: DateLike, end: DateLike) -> float:
    """
    Elapsed years between two dates: whole years and months via relativedelta,
    remaining days as a fraction of 365.25. Negative if end precedes start.
    """
    s = to_timestamp(start)
    e = to_timestamp(end)
    if s is None or e is None:
        return 0.0
    if e < s:
        return -years_between(e, s)
    delta = relativedelta(e.to_pydatetime(), s.to_pydatetime())
    anchor = s + pd.DateOffset(years=delta.years, months=delta.months)
    return delta.years + delta.months / 12.0 + (e - anchor).days / 365.25


def is_finite_number(value) -> bool:
    """True for finite real numbers (numpy scalars included); bools and numeric strings are rejected."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


def is_positive_int(value) -> bool:
    """True for integers (numpy integers included) greater than zero; bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        return False
    return int(value) > 0


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise InvalidInput(f"Missing required columns: {missing}")
