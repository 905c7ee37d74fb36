"""
app/api/routers/indicators.py

Comparison endpoint backed by the World Bank indicator source.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app import failure_codes
from app.logging_utils import log_event
from app.schemas.comparison import ComparisonResponse
from app.services.comparison_service import ComparisonService, get_comparison_service
from app.services.indicator_service import (
    IndicatorService,
    MissingCountriesError,
    UnknownCountryError,
    UpstreamUnavailableError,
    get_indicator_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["comparison"])


@router.get("/indicators", response_model=ComparisonResponse)
def get_indicators(
    response: Response,
    countries: str = Query(default="", description="Comma-separated country names or ISO-3 codes"),
    year: str | None = Query(default=None, description="Preferred period; latest available otherwise"),
    indicator_service: IndicatorService = Depends(get_indicator_service),
    comparison_service: ComparisonService = Depends(get_comparison_service),
) -> ComparisonResponse:
    """
    Fetch indicators for the requested countries and compare them.
    """

    response.headers["Cache-Control"] = "no-store"
    year = year.strip() if year and year.strip() else None

    try:
        fetched = indicator_service.fetch_indicators(countries, year)
    except MissingCountriesError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": failure_codes.MISSING_COUNTRIES, "message": str(exc)},
            headers={"Cache-Control": "no-store"},
        ) from exc
    except UnknownCountryError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": failure_codes.UNKNOWN_COUNTRY,
                "message": str(exc),
                "unknown": list(exc.names),
                "hint": "Use a Spanish or English country name, or an ISO-3 code.",
            },
            headers={"Cache-Control": "no-store"},
        ) from exc
    except UpstreamUnavailableError as exc:
        log_event(logger, logging.ERROR, "indicator_source_failed", countries=countries, error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "code": failure_codes.UPSTREAM_UNAVAILABLE,
                "message": "Indicator source is unavailable. Try again later.",
                "error": str(exc),
            },
            headers={"Cache-Control": "no-store"},
        ) from exc

    return comparison_service.compare(
        fetched.rows,
        meta={
            "request": {"countries": fetched.meta.requested, "year": year},
            "resolved": fetched.meta.to_dict(),
        },
    )
