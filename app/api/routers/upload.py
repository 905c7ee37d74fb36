"""
app/api/routers/upload.py

Comparison endpoint backed by a user-uploaded CSV or JSON file.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, UploadFile, status

from app import failure_codes
from app.api.dependencies import get_indicator_upload
from app.logging_utils import log_event
from app.schemas.comparison import ComparisonResponse
from app.services.comparison_service import ComparisonService, get_comparison_service
from app.services.upload_ingestion_service import (
    UploadIngestionService,
    UploadValidationError,
    get_upload_ingestion_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["comparison"])


@router.post("/upload", response_model=ComparisonResponse)
def upload_indicators(
    response: Response,
    file: UploadFile = Depends(get_indicator_upload),
    year: str | None = Query(default=None, description="Period applied to rows without one"),
    ingestion_service: UploadIngestionService = Depends(get_upload_ingestion_service),
    comparison_service: ComparisonService = Depends(get_comparison_service),
) -> ComparisonResponse:
    """
    Compare the countries contained in one uploaded file.
    """

    response.headers["Cache-Control"] = "no-store"
    year = year.strip() if year and year.strip() else None

    try:
        parsed = ingestion_service.ingest_upload(upload_file=file, default_year=year)
    except UploadValidationError as exc:
        log_event(
            logger,
            logging.WARNING,
            "upload_rejected",
            filename=file.filename,
            error=exc.message,
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": failure_codes.INVALID_UPLOAD,
                **exc.to_dict(),
            },
            headers={"Cache-Control": "no-store"},
        ) from exc
    finally:
        file.file.close()

    return comparison_service.compare(
        parsed.rows,
        meta={
            "request": {"upload": True, "filename": file.filename, "year": year},
            "upload": {
                "rows_accepted": len(parsed.rows),
                "rows_failed": parsed.rows_failed,
                "validation_errors": [
                    {
                        "row_number": error.row_number,
                        "column": error.column,
                        "message": error.message,
                        "value": error.value,
                    }
                    for error in parsed.validation_errors
                ],
            },
        },
    )
