"""
comparison/charts.py

Chart-ready projections of a ranked comparison (radar and bar datasets).
"""

from __future__ import annotations

from typing import Any, Sequence

from comparison.models import NormalizedCountry

RADAR_LABELS: tuple[tuple[str, str], ...] = (
    ("Internet usage", "(%)"),
    ("Fixed broadband", "(subscriptions/100)"),
    ("International bandwidth", "(Mbps/user)"),
)

SCORE_SERIES_LABEL = "Score (0–1)"


def to_radar_dataset(comparison: Sequence[NormalizedCountry]) -> dict[str, Any]:
    """One series per country holding its normalized [access, infra, capacity]."""
    return {
        "labels": [list(label) for label in RADAR_LABELS],
        "datasets": [
            {"label": country.country, "data": country.norm.as_list()}
            for country in comparison
        ],
    }


def to_bar_dataset(comparison: Sequence[NormalizedCountry]) -> dict[str, Any]:
    """A single score series, one bar per country in comparison order."""
    return {
        "labels": [country.country for country in comparison],
        "datasets": [
            {
                "label": SCORE_SERIES_LABEL,
                "data": [country.score for country in comparison],
            }
        ],
    }
