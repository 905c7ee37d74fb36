"""
app/services package marker.
"""

from app.services.comparison_service import ComparisonService, get_comparison_service
from app.services.indicator_service import (
    IndicatorService,
    MissingCountriesError,
    UnknownCountryError,
    UpstreamUnavailableError,
    get_indicator_service,
)
from app.services.upload_ingestion_service import (
    UploadIngestionService,
    UploadValidationError,
    get_upload_ingestion_service,
)

__all__ = [
    "ComparisonService",
    "get_comparison_service",
    "IndicatorService",
    "MissingCountriesError",
    "UnknownCountryError",
    "UpstreamUnavailableError",
    "get_indicator_service",
    "UploadIngestionService",
    "UploadValidationError",
    "get_upload_ingestion_service",
]
