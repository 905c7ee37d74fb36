"""
app/validators/mapping_validator.py

Validation for upload column mapping resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured mapping error detail.
    """

    code: str
    message: str
    canonical_field: str | None = None
    source_column: str | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "canonical_field": self.canonical_field,
            "source_column": self.source_column,
            "context": self.context,
        }


class SchemaMappingError(ValueError):
    """
    Raised when an uploaded file's columns cannot be mapped safely.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [error.to_dict() for error in self.errors],
        }


class MappingValidator:
    """
    Validates resolved canonical-to-source mappings.
    """

    def __init__(
        self,
        *,
        required_fields: Sequence[str],
        canonical_fields: Sequence[str],
    ) -> None:
        self._required_fields = tuple(required_fields)
        self._canonical_set = set(canonical_fields)

    def validate(
        self,
        *,
        mapping: dict[str, str],
        source_headers: Sequence[str],
        pre_errors: Sequence[MappingErrorDetail] | None = None,
    ) -> None:
        """
        Raise SchemaMappingError listing every problem, or return silently.
        """

        errors: list[MappingErrorDetail] = list(pre_errors or [])
        headers_set = set(source_headers)

        for canonical_field, source_column in mapping.items():
            if canonical_field not in self._canonical_set:
                errors.append(
                    MappingErrorDetail(
                        code="invalid_canonical_field",
                        message="Unknown canonical field in mapping.",
                        canonical_field=canonical_field,
                        source_column=source_column,
                    )
                )
            if source_column not in headers_set:
                errors.append(
                    MappingErrorDetail(
                        code="unknown_source_column",
                        message="Mapped column does not exist in the file headers.",
                        canonical_field=canonical_field,
                        source_column=source_column,
                    )
                )

        for required in self._required_fields:
            if required not in mapping:
                errors.append(
                    MappingErrorDetail(
                        code="required_field_unmapped",
                        message="Required column is missing.",
                        canonical_field=required,
                        context={"source_headers": list(source_headers)},
                    )
                )

        if errors:
            missing_required = sorted(
                {
                    error.canonical_field
                    for error in errors
                    if error.code == "required_field_unmapped" and error.canonical_field
                }
            )
            missing_text = ", ".join(missing_required) or "none"
            raise SchemaMappingError(
                message=f"Invalid structure: column mapping failed. Missing required columns: {missing_text}.",
                errors=errors,
            )
