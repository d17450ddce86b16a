"""
Shared utility helpers for the listing layer.

Pure functions with no I/O.
"""

from __future__ import annotations

import math
import re
from typing import List, Optional

import numpy as np


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def tokenize(text: str) -> List[str]:
    """Lowercase text and extract alphanumeric tokens."""
    return re.findall(r"[a-z0-9]+", text.lower())


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, drop punctuation and collapse whitespace (address matching)."""
    if not text:
        return ""
    return " ".join(tokenize(str(text)))


def normalize_key(text: Optional[str]) -> str:
    """Normalise a friendly field name: lowercase, `_`/`-` as spaces, single spaces."""
    if not text:
        return ""
    return re.sub(r"[\s_\-]+", " ", str(text).strip().lower()).strip()


def is_blank(value) -> bool:
    return value is None or str(value).strip() == ""


# ---------------------------------------------------------------------------
# Smart numeric parsing (currency, SI suffixes)
# ---------------------------------------------------------------------------

_SUFFIX_MAP = {
    "k": 1_000.0,
    "m": 1_000_000.0,
    "mm": 1_000_000.0,
    "b": 1_000_000_000.0,
    "bn": 1_000_000_000.0,
}


def smart_numeric_value(val) -> float:
    """Parse a single value that might be currency or SI-suffixed; NaN when it isn't a number."""
    if val is None or isinstance(val, bool):
        return np.nan
    if isinstance(val, (int, float)):
        return float(val)
    text = str(val).strip()
    if not text:
        return np.nan
    text = text.replace(",", "").replace("$", "").strip()
    lower = text.lower()
    if lower in {"n/a", "na", "nan", "none", "null", "-", "--", "inf", "-inf", "infinity"}:
        return np.nan

    for suffix in sorted(_SUFFIX_MAP.keys(), key=len, reverse=True):
        if lower.endswith(suffix):
            num_part = text[: -len(suffix)].strip()
            try:
                return float(num_part) * _SUFFIX_MAP[suffix]
            except ValueError:
                return np.nan

    try:
        return float(text)
    except ValueError:
        return np.nan


def parse_number(val) -> Optional[float]:
    """Like smart_numeric_value but returns None for anything non-finite."""
    num = smart_numeric_value(val)
    if not math.isfinite(num):
        return None
    return num


def group_digits(num: float) -> str:
    """1234567 -> '1,234,567'; keeps two decimals for fractional values."""
    if float(num).is_integer():
        return f"{int(num):,}"
    return f"{num:,.2f}"


def value_text(value) -> str:
    """Render a planner value as text for string comparisons (3.0 -> '3')."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
