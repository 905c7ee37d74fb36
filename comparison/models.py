"""
comparison/models.py

Value types flowing through the comparison engine.

Every record is a frozen dataclass: stages build new instances instead of
mutating their inputs, so a caller's row collection is never modified.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union

Period = Union[str, int, None]

# Raw indicator fields, in axis order (usage, infrastructure, capacity).
ACCESS_FIELD = "access_internet_pct"
INFRA_FIELD = "fixed_broadband_subs_per100"
CAPACITY_FIELD = "broadband_speed_mbps"
MOBILE_COST_FIELD = "mobile_data_cost_pct_income"

NUMERIC_FIELDS: tuple[str, ...] = (
    ACCESS_FIELD,
    INFRA_FIELD,
    CAPACITY_FIELD,
    MOBILE_COST_FIELD,
)

AXES: tuple[str, ...] = ("access", "infra", "capacity")

AXIS_TO_FIELD: dict[str, str] = {
    "access": ACCESS_FIELD,
    "infra": INFRA_FIELD,
    "capacity": CAPACITY_FIELD,
}


@dataclass(frozen=True)
class InputRow:
    """
    One country observation before consolidation.

    ``country`` need not be unique across rows. Missing numeric values are
    ``None``; zero is a real measurement.
    """

    country: str
    year: Period = None
    access_internet_pct: float | None = None
    fixed_broadband_subs_per100: float | None = None
    broadband_speed_mbps: float | None = None
    mobile_data_cost_pct_income: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ConsolidatedCountry:
    """
    Exactly one record per country key, duplicates merged.
    """

    country: str
    year: Period = None
    access_internet_pct: float | None = None
    fixed_broadband_subs_per100: float | None = None
    broadband_speed_mbps: float | None = None
    mobile_data_cost_pct_income: float | None = None

    def raw_axis_value(self, axis: str) -> float | None:
        return getattr(self, AXIS_TO_FIELD[axis])


@dataclass(frozen=True)
class AxisScores:
    """
    Normalized axis values, each in [0, 1].
    """

    access: float
    infra: float
    capacity: float

    def as_list(self) -> list[float]:
        return [self.access, self.infra, self.capacity]


@dataclass(frozen=True)
class Weights:
    """
    Batch-level axis weights: ``0`` for an axis without data, ``1/k`` otherwise.
    """

    access: float = 0.0
    infra: float = 0.0
    capacity: float = 0.0

    def total(self) -> float:
        return self.access + self.infra + self.capacity

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class NormalizedCountry:
    """
    A consolidated country with its normalized axes, composite score and rank.

    ``rank`` is ``0`` until the ranking stage assigns the 1-based position.
    """

    country: str
    year: Period
    access_internet_pct: float | None
    fixed_broadband_subs_per100: float | None
    broadband_speed_mbps: float | None
    mobile_data_cost_pct_income: float | None
    norm: AxisScores
    score: float
    rank: int = 0

    def raw_axis_value(self, axis: str) -> float | None:
        return getattr(self, AXIS_TO_FIELD[axis])

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ComparisonResult:
    """
    Full engine output for one batch.
    """

    comparison: list[NormalizedCountry]
    weights: Weights
    insights: list[str] = field(default_factory=list)
    charts: dict[str, Any] = field(default_factory=dict)
