"""
app/domain package marker.
"""

from app.domain.countries import COUNTRY_ALIASES, display_name, resolve_iso3
from app.domain.ingestion import (
    IndicatorFetchMeta,
    IndicatorFetchResult,
    Observation,
    RowValidationError,
    UploadParseResult,
)

__all__ = [
    "COUNTRY_ALIASES",
    "IndicatorFetchMeta",
    "IndicatorFetchResult",
    "Observation",
    "RowValidationError",
    "UploadParseResult",
    "display_name",
    "resolve_iso3",
]
