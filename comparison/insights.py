"""
comparison/insights.py

Derives short human-readable findings from a ranked comparison.

Findings are recomputed on every call and never stored. Rules run in a fixed
order, each contributing at most one line:

    1. top score
    2. gap between first and last (more than one country)
    3. most differentiating axis (largest sample std. dev. of normalized values)
    4. raw leader per indicator (one line per axis with data)
    5. missing-data disclosure
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from comparison.models import AXES, NormalizedCountry, Weights
from comparison.normalizer import NEUTRAL_VALUE, round2

AXIS_LABELS: dict[str, str] = {
    "access": "Usage",
    "infra": "Fixed infrastructure",
    "capacity": "Capacity",
}

_LEADER_TEMPLATES: dict[str, str] = {
    "access": "Leader in internet usage: {country} ({value}%).",
    "infra": "Leader in fixed broadband: {country} ({value} subscriptions/100).",
    "capacity": "Leader in international bandwidth: {country} ({value} Mbps/user).",
}

MISSING_DATA_NOTE = (
    "Note: some values were missing and were imputed as neutral "
    f"({NEUTRAL_VALUE}) during normalization."
)


def format_number(value: float) -> str:
    """Render a value rounded to 2 decimals without trailing zeros."""
    text = f"{round2(value):.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def sample_stdev(values: Sequence[Any]) -> float:
    """Bessel-corrected standard deviation over the finite entries.

    Returns 0.0 when fewer than two finite values are present.
    """
    array = np.asarray(
        [value if value is not None else np.nan for value in values], dtype=np.float64
    )
    finite = array[np.isfinite(array)]
    if finite.size < 2:
        return 0.0
    return float(np.std(finite, ddof=1))


def max_index(values: Sequence[Any]) -> int:
    """Index of the largest finite value, first occurrence on ties; -1 if none."""
    best_index = -1
    best_value = float("-inf")
    for index, value in enumerate(values):
        if value is None or not np.isfinite(value):
            continue
        if value > best_value:
            best_value = value
            best_index = index
    return best_index


def missing_share(values: Sequence[Any]) -> float:
    """Fraction of entries that are not finite numbers."""
    total = len(values) or 1
    missing = sum(1 for value in values if value is None or not np.isfinite(value))
    return missing / total


def derive_insights(ranked: Sequence[NormalizedCountry], weights: Weights) -> list[str]:
    """Build the ordered list of findings for a ranked comparison.

    Args:
        ranked: Countries sorted by descending score.
        weights: Weights used to compute the scores.

    Returns:
        Between 0 (empty input) and 7 sentences.
    """
    insights: list[str] = []
    if not ranked:
        return insights

    top, last = ranked[0], ranked[-1]
    insights.append(f"Top score is {top.country} ({format_number(top.score)}).")
    if len(ranked) > 1:
        gap = format_number(top.score - last.score)
        insights.append(f"Gap between first and last: {gap} points (0-1 scale).")

    dispersion = [
        (axis, sample_stdev([getattr(country.norm, axis) for country in ranked]))
        for axis in AXES
    ]
    # Stable sort: ties resolve to the earliest axis.
    driver, driver_sd = sorted(dispersion, key=lambda item: item[1], reverse=True)[0]
    if driver_sd > 0:
        insights.append(
            f"Most differentiating axis: {AXIS_LABELS[driver]} "
            f"(std. dev. {format_number(driver_sd)}, "
            f"weight {format_number(getattr(weights, driver))})."
        )

    raw_columns = {axis: [country.raw_axis_value(axis) for country in ranked] for axis in AXES}
    for axis in AXES:
        leader = max_index(raw_columns[axis])
        if leader < 0:
            continue
        insights.append(
            _LEADER_TEMPLATES[axis].format(
                country=ranked[leader].country,
                value=format_number(raw_columns[axis][leader]),
            )
        )

    if max(missing_share(raw_columns[axis]) for axis in AXES) > 0:
        insights.append(MISSING_DATA_NOTE)

    return insights
