"""
app/schemas package marker.
"""

from app.schemas.comparison import (
    AxisScoresResponse,
    ChartResponse,
    ChartsResponse,
    ComparedCountryResponse,
    ComparisonResponse,
    HealthResponse,
    InputRowResponse,
    WeightsResponse,
)

__all__ = [
    "AxisScoresResponse",
    "ChartResponse",
    "ChartsResponse",
    "ComparedCountryResponse",
    "ComparisonResponse",
    "HealthResponse",
    "InputRowResponse",
    "WeightsResponse",
]
