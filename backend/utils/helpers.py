"""
Helper Functions

This module contains utility functions used throughout the application.
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from dateutil import parser as dtparser


def parse_ts(x: Any) -> Optional[datetime]:
    """Parse timestamp from various formats"""
    if not x:
        return None
    try:
        dt = dtparser.isoparse(str(x))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def safe_int(x: Any) -> Optional[int]:
    """Safely convert to int"""
    if x is None or isinstance(x, bool):
        return None
    try:
        return int(x)
    except (TypeError, ValueError, OverflowError):
        return None


def safe_float(x: Any) -> Optional[float]:
    """Safely convert to float, rejecting NaN and infinities"""
    if x is None or isinstance(x, bool):
        return None
    try:
        value = float(x)
    except (TypeError, ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def safe_str(x: Any) -> Optional[str]:
    """Convert to str, mapping None and empty strings to None"""
    if x is None:
        return None
    s = str(x)
    return s or None


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence"""
    if not values:
        return 0.0
    return sum(values) / len(values)


def quantile(sorted_vals: Sequence[float], q: float) -> float:
    """Linear-interpolated percentile on an ascending sequence"""
    n = len(sorted_vals)
    if n == 0:
        return 0.0
    if n == 1:
        return float(sorted_vals[0])
    pos = q * (n - 1)
    lo = math.floor(pos)
    hi = math.ceil(pos)
    if lo == hi:
        return float(sorted_vals[lo])
    lower, upper = sorted_vals[lo], sorted_vals[hi]
    frac = pos - lo
    delta = upper - lower
    if math.isfinite(delta):
        value = lower + delta * frac
    else:
        value = lower * (1 - frac) + upper * frac
    # result stays inside [lower, upper]
    return float(min(max(value, lower), upper))
