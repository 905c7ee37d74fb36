"""
comparison/scoring.py

Uniform-weight composite scoring and ranking.
Weights adapt to data availability: every axis with at least one value
shares the weight equally, axes without data weigh 0.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from comparison.base import BaseScoringModel
from comparison.models import (
    AXES,
    AxisScores,
    ConsolidatedCountry,
    NormalizedCountry,
    Weights,
)
from comparison.normalizer import AxisNormalizer, round2


class UniformWeightModel(BaseScoringModel):
    """Min-max normalizes each axis and averages the active ones.

    score = round2(norm.access * w.access + norm.infra * w.infra
                   + norm.capacity * w.capacity)

    All three indicators are "higher is better".
    """

    HIGHER_IS_BETTER: dict[str, bool] = {
        "access": True,
        "infra": True,
        "capacity": True,
    }

    def __init__(self) -> None:
        self._normalizer = AxisNormalizer()

    def compute(
        self, countries: Sequence[ConsolidatedCountry]
    ) -> tuple[list[NormalizedCountry], Weights]:
        if not countries:
            return [], Weights()

        columns = {
            axis: [country.raw_axis_value(axis) for country in countries] for axis in AXES
        }
        weights = self.compute_weights(columns)
        scaled = {
            axis: self._normalizer.scale(columns[axis], self.HIGHER_IS_BETTER[axis])
            for axis in AXES
        }

        scored: list[NormalizedCountry] = []
        for index, country in enumerate(countries):
            norm = AxisScores(
                access=scaled["access"][index],
                infra=scaled["infra"][index],
                capacity=scaled["capacity"][index],
            )
            weighted_sum = (
                norm.access * weights.access
                + norm.infra * weights.infra
                + norm.capacity * weights.capacity
            )
            scored.append(
                NormalizedCountry(
                    country=country.country,
                    year=country.year,
                    access_internet_pct=country.access_internet_pct,
                    fixed_broadband_subs_per100=country.fixed_broadband_subs_per100,
                    broadband_speed_mbps=country.broadband_speed_mbps,
                    mobile_data_cost_pct_income=country.mobile_data_cost_pct_income,
                    norm=norm,
                    score=round2(weighted_sum),
                )
            )
        return scored, weights

    def compute_weights(self, columns: dict[str, list[float | None]]) -> Weights:
        """Give each axis with data a weight of 1/k, and 0 to axes without data."""
        active = {axis: self._normalizer.has_data(columns[axis]) for axis in AXES}
        active_count = sum(active.values()) or 1
        return Weights(
            **{axis: (1.0 / active_count if active[axis] else 0.0) for axis in AXES}
        )


def score_all(
    countries: Sequence[ConsolidatedCountry],
) -> tuple[list[NormalizedCountry], Weights]:
    """Score a consolidated batch with the uniform-weight model."""
    return UniformWeightModel().compute(countries)


def rank_countries(scored: Sequence[NormalizedCountry]) -> list[NormalizedCountry]:
    """Return a new list sorted by descending score with 1-based ranks.

    The sort is stable, so equal scores keep their batch order.
    """
    ordered = sorted(scored, key=lambda country: country.score, reverse=True)
    return [replace(country, rank=position + 1) for position, country in enumerate(ordered)]
