"""
app/domain/ingestion.py

Domain models shared by the indicator and upload ingestion flows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from comparison.models import InputRow


@dataclass(frozen=True)
class Observation:
    """
    One (period, value) pair picked from an indicator time series.
    """

    period: str | None
    value: float | None


@dataclass(frozen=True)
class IndicatorFetchMeta:
    """
    How the indicator rows were resolved against the source.
    """

    requested: list[str]
    resolved: list[str]
    per_country_year: dict[str, str | None] = field(default_factory=dict)
    speed_source: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "requested": list(self.requested),
            "resolved": list(self.resolved),
            "per_country_year": dict(self.per_country_year),
            "speed_source": dict(self.speed_source),
        }


@dataclass(frozen=True)
class IndicatorFetchResult:
    """
    Rows fetched from the indicator source plus resolution metadata.
    """

    rows: list[InputRow]
    meta: IndicatorFetchMeta


@dataclass(frozen=True)
class RowValidationError:
    """
    One uploaded row validation error detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class UploadParseResult:
    """
    End-of-parse summary for one uploaded file.
    """

    rows: list[InputRow]
    rows_failed: int
    validation_errors: list[RowValidationError] = field(default_factory=list)
