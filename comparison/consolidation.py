"""
comparison/consolidation.py

Merges duplicate per-country rows into one record per country.

The grouping key is the raw ``country`` string. No case folding or accent
stripping happens here, so "México" and "Mexico" stay two separate countries.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from comparison.models import NUMERIC_FIELDS, ConsolidatedCountry, InputRow, Period


def is_finite_number(value: Any) -> bool:
    """Return True for real, finite numbers (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond the float range
        return False


def first_finite(current: float | None, candidate: float | None) -> float | None:
    """Keep ``current`` when it is already a finite number, else fall back to ``candidate``.

    This is the "first non-null wins" rule: a later row only fills gaps and
    never overwrites a value taken from an earlier row.

    Args:
        current: Value accumulated from earlier rows.
        candidate: Value carried by the row being merged.

    Returns:
        The first finite number of the pair, or None when neither is finite.
    """
    if is_finite_number(current):
        return float(current)
    if is_finite_number(candidate):
        return float(candidate)
    return None


def first_period(current: Period, candidate: Period) -> Period:
    """Keep the earliest non-None period tag."""
    return current if current is not None else candidate


def consolidate(rows: Sequence[InputRow]) -> list[ConsolidatedCountry]:
    """Group rows by exact country key, preserving order of first appearance.

    Args:
        rows: Input observations; country keys may repeat.

    Returns:
        One ConsolidatedCountry per unique key. Empty input yields an empty list.
    """
    merged: dict[str, dict[str, Any]] = {}

    for row in rows:
        bucket = merged.get(row.country)
        if bucket is None:
            bucket = {"country": row.country, "year": None}
            bucket.update({name: None for name in NUMERIC_FIELDS})
            merged[row.country] = bucket

        bucket["year"] = first_period(bucket["year"], row.year)
        for name in NUMERIC_FIELDS:
            bucket[name] = first_finite(bucket[name], getattr(row, name))

    return [ConsolidatedCountry(**values) for values in merged.values()]
