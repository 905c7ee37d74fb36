"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

from app import failure_codes

UPLOAD_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
    "application/json",
    "text/json",
    "text/plain",
}

UPLOAD_EXTENSIONS = (".csv", ".json", ".txt")


def get_indicator_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is CSV or JSON by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";")[0].strip().lower()

    if not filename.endswith(UPLOAD_EXTENSIONS) and content_type not in UPLOAD_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "code": failure_codes.INVALID_UPLOAD,
                "message": "Only CSV or JSON files are allowed.",
            },
            headers={"Cache-Control": "no-store"},
        )

    return file
