"""
app/services/upload_ingestion_service.py

Service layer for turning an uploaded CSV or JSON file into comparison rows.

CSV files are read as UTF-8 (BOM tolerated). The delimiter is ';' when the
header line carries more semicolons than commas, ',' otherwise. JSON files
must hold an array of objects. Either way, columns are resolved through
UploadSchemaMapper and every row is parsed by UploadRowValidator.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from functools import lru_cache
from typing import Any, Iterable, Mapping

from fastapi import UploadFile

from app.config import get_upload_ingestion_settings
from app.domain.ingestion import RowValidationError, UploadParseResult
from app.mappers.schema_mapper import UploadSchemaMapper
from app.validators.mapping_validator import MappingErrorDetail, SchemaMappingError
from app.validators.upload_validator import UploadRowValidator
from comparison.models import InputRow

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPES = {"application/json", "text/json"}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UploadValidationError(ValueError):
    """
    Raised when an uploaded file is unreadable or has no usable rows.
    """

    def __init__(self, message: str, *, errors: Iterable[MappingErrorDetail] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "errors": [error.to_dict() for error in self.errors],
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_json_upload(filename: str | None, content_type: str | None) -> bool:
    """
    Decide JSON vs CSV from MIME type first, then file extension.
    """

    normalized_type = (content_type or "").split(";")[0].strip().lower()
    if normalized_type in JSON_CONTENT_TYPES or normalized_type.endswith("+json"):
        return True
    return (filename or "").strip().lower().endswith(".json")


def sniff_delimiter(text: str) -> str:
    """
    Pick ';' or ',' by counting both on the first line.
    """

    first_line = text.splitlines()[0] if text else ""
    return ";" if first_line.count(";") > first_line.count(",") else ","


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class UploadIngestionService:
    """
    Coordinates decoding, column mapping and row validation for uploads.
    """

    def __init__(
        self,
        *,
        max_bytes: int,
        max_validation_errors: int,
        log_validation_errors: bool,
        mapper: UploadSchemaMapper | None = None,
        validator: UploadRowValidator | None = None,
    ) -> None:
        self._max_bytes = max(1, max_bytes)
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._mapper = mapper or UploadSchemaMapper()
        self._validator = validator or UploadRowValidator()

    def ingest_upload(
        self,
        *,
        upload_file: UploadFile,
        default_year: str | None = None,
    ) -> UploadParseResult:
        """
        Read an uploaded file (capped at the configured size) and parse it.
        """

        raw_file = upload_file.file
        raw_file.seek(0)
        content = raw_file.read(self._max_bytes + 1)
        return self.parse_content(
            content=content,
            filename=upload_file.filename,
            content_type=upload_file.content_type,
            default_year=default_year,
        )

    def parse_content(
        self,
        *,
        content: bytes,
        filename: str | None = None,
        content_type: str | None = None,
        default_year: str | None = None,
    ) -> UploadParseResult:
        """
        Parse raw file bytes into InputRows.

        Raises:
            UploadValidationError: Oversized, undecodable or malformed file,
                missing country column, or no row with a country.
        """

        if len(content) > self._max_bytes:
            raise UploadValidationError(f"File exceeds the {self._max_bytes}-byte upload limit.")

        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise UploadValidationError("File must be UTF-8 encoded.") from exc

        if is_json_upload(filename, content_type):
            headers, records = self._read_json(text)
        else:
            headers, records = self._read_csv(text)

        try:
            mapping = self._mapper.resolve_mapping(headers)
        except SchemaMappingError as exc:
            raise UploadValidationError(exc.message, errors=exc.errors) from exc

        rows: list[InputRow] = []
        rows_failed = 0
        captured_errors: list[RowValidationError] = []

        for row_number, raw_row in records:
            if self._validator.is_completely_empty_row(raw_row):
                continue

            mapped_row = self._mapper.map_row(raw_row=raw_row, mapping=mapping)
            parsed_row, row_errors = self._validator.validate_mapped_row(
                mapped_row=mapped_row,
                row_number=row_number,
                default_year=default_year,
            )
            for error in row_errors:
                self._record_error(captured_errors, error)
            if parsed_row is None:
                rows_failed += 1
                continue
            rows.append(parsed_row)

        if not rows:
            raise UploadValidationError("Invalid structure: no rows with a country value.")

        logger.info(
            "Upload parsed rows=%s rows_failed=%s validation_errors=%s",
            len(rows),
            rows_failed,
            len(captured_errors),
        )
        return UploadParseResult(
            rows=rows,
            rows_failed=rows_failed,
            validation_errors=captured_errors,
        )

    # ------------------------------------------------------------------
    # Format readers
    # ------------------------------------------------------------------

    def _read_csv(self, text: str) -> tuple[list[str], list[tuple[int, Mapping[str, Any]]]]:
        try:
            reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=sniff_delimiter(text))
            headers = [header for header in (reader.fieldnames or []) if header is not None]
            if not headers:
                raise UploadValidationError("CSV header row is missing.")
            records = [
                (row_number, self._strip_overflow(raw_row))
                for row_number, raw_row in enumerate(reader, start=2)
            ]
        except csv.Error as exc:
            raise UploadValidationError(f"Invalid CSV format: {exc}") from exc
        return headers, records

    def _read_json(self, text: str) -> tuple[list[str], list[tuple[int, Mapping[str, Any]]]]:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise UploadValidationError(f"Invalid JSON: {exc.msg}.") from exc
        except ValueError as exc:
            # e.g. integer literals past the interpreter's digit limit
            raise UploadValidationError(f"Invalid JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise UploadValidationError("JSON upload must be an array of objects.")

        headers: list[str] = []
        seen: set[str] = set()
        records: list[tuple[int, Mapping[str, Any]]] = []
        for index, item in enumerate(payload, start=1):
            if not isinstance(item, dict):
                self._record_skipped_item(index)
                continue
            for key in item:
                if isinstance(key, str) and key not in seen:
                    seen.add(key)
                    headers.append(key)
            records.append((index, item))
        return headers, records

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _strip_overflow(raw_row: Mapping[Any, Any]) -> dict[str, Any]:
        # DictReader stores surplus cells under the None key.
        return {key: value for key, value in raw_row.items() if key is not None}

    def _record_skipped_item(self, index: int) -> None:
        if self._log_validation_errors:
            logger.warning("JSON upload item skipped index=%s reason=not_an_object", index)

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Upload validation error row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_upload_ingestion_service() -> UploadIngestionService:
    """
    Build and cache the upload ingestion service with env-driven settings.
    """

    settings = get_upload_ingestion_settings()
    return UploadIngestionService(
        max_bytes=settings.max_bytes,
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )
