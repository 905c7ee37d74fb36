"""
app/schemas/comparison.py

Response schemas for comparison endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class InputRowResponse(BaseModel):
    """
    One raw indicator row as received by the engine.
    """

    country: str
    year: str | int | None = None
    access_internet_pct: float | None = None
    fixed_broadband_subs_per100: float | None = None
    broadband_speed_mbps: float | None = None
    mobile_data_cost_pct_income: float | None = None


class AxisScoresResponse(BaseModel):
    """
    Normalized axis values in [0, 1].
    """

    access: float = Field(..., ge=0.0, le=1.0)
    infra: float = Field(..., ge=0.0, le=1.0)
    capacity: float = Field(..., ge=0.0, le=1.0)


class ComparedCountryResponse(InputRowResponse):
    """
    One ranked country with normalized axes and composite score.
    """

    norm: AxisScoresResponse
    score: float = Field(..., ge=0.0, le=1.0)
    rank: int = Field(..., ge=1)


class WeightsResponse(BaseModel):
    """
    Axis weights applied to the batch.
    """

    access: float = Field(..., ge=0.0, le=1.0)
    infra: float = Field(..., ge=0.0, le=1.0)
    capacity: float = Field(..., ge=0.0, le=1.0)


class ChartDatasetResponse(BaseModel):
    label: str
    data: list[float]


class ChartResponse(BaseModel):
    labels: list[Any]
    datasets: list[ChartDatasetResponse]


class ChartsResponse(BaseModel):
    radar: ChartResponse
    bars: ChartResponse


class ComparisonResponse(BaseModel):
    """
    Full comparison payload returned by both data-source endpoints.
    """

    raw: list[InputRowResponse]
    comparison: list[ComparedCountryResponse]
    weights: WeightsResponse
    charts: ChartsResponse
    insights: list[str] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    ok: bool
    ts: int
