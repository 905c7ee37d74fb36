"""
app/validators/upload_validator.py

Row-level validation and type parsing for uploaded indicator files.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from app.domain.ingestion import RowValidationError
from comparison.models import NUMERIC_FIELDS, InputRow


def parse_flexible_number(value: Any) -> float | None:
    """
    Parse a number written with either decimal convention.

    - ``"12,5"`` -> 12.5 (comma as decimal separator)
    - ``"1.234,5"`` -> 1234.5 (dot thousands, comma decimal)
    - ``"1234.5"`` -> 1234.5
    Blank, unparsable or non-finite input returns None.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None

    text = str(value).strip()
    if not text:
        return None
    if "," in text and "." not in text:
        text = text.replace(",", ".", 1)
    elif "," in text and "." in text:
        text = text.replace(".", "").replace(",", ".", 1)

    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


class UploadRowValidator:
    """
    Validates and parses mapped canonical row values.
    """

    def is_completely_empty_row(self, row: Mapping[str, Any]) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        return all(self._is_blank(value) for value in row.values())

    def validate_mapped_row(
        self,
        *,
        mapped_row: Mapping[str, Any],
        row_number: int,
        default_year: str | None = None,
    ) -> tuple[InputRow | None, list[RowValidationError]]:
        """
        Parse one mapped row into an InputRow.

        A row without a country is rejected. Unparsable numbers become
        missing values and are reported, but do not reject the row.
        """

        errors: list[RowValidationError] = []

        country_raw = mapped_row.get("country")
        if self._is_blank(country_raw):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="country",
                    message="Required value is missing.",
                    value=self._stringify_value(country_raw),
                )
            )
            return None, errors

        numbers: dict[str, float | None] = {}
        for name in NUMERIC_FIELDS:
            raw_value = mapped_row.get(name)
            parsed = parse_flexible_number(raw_value)
            if parsed is None and not self._is_blank(raw_value):
                errors.append(
                    RowValidationError(
                        row_number=row_number,
                        column=name,
                        message="Value is not a finite number; treated as missing.",
                        value=self._stringify_value(raw_value),
                    )
                )
            numbers[name] = parsed

        return (
            InputRow(
                country=str(country_raw).strip(),
                year=self._parse_year(mapped_row.get("year"), default_year),
                **numbers,
            ),
            errors,
        )

    def _parse_year(self, value: Any, default_year: str | None) -> str | None:
        if self._is_blank(value):
            return default_year if default_year else None
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, (list, tuple)):
            return all(str(item).strip() == "" for item in value)
        return str(value).strip() == ""

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)
