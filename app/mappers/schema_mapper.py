"""
app/mappers/schema_mapper.py

Column mapping engine for uploaded indicator files.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Any, Mapping, Sequence

from app.domain.countries import strip_accents
from app.validators.mapping_validator import MappingErrorDetail, MappingValidator, SchemaMappingError

CANONICAL_FIELDS: tuple[str, ...] = (
    "country",
    "year",
    "access_internet_pct",
    "fixed_broadband_subs_per100",
    "broadband_speed_mbps",
    "mobile_data_cost_pct_income",
)

REQUIRED_CANONICAL_FIELDS: tuple[str, ...] = ("country",)

DEFAULT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "country": ("pais", "país", "country_name", "nation"),
    "year": ("anio", "año", "period", "date"),
    "access_internet_pct": ("acceso_internet_pct", "acceso", "internet_users_pct", "internet_pct"),
    "fixed_broadband_subs_per100": ("banda_fija_100", "banda_fija", "fixed_broadband"),
    "broadband_speed_mbps": ("velocidad_ba_mbps", "velocidad", "bandwidth_mbps", "speed_mbps"),
    "mobile_data_cost_pct_income": ("costo_datos_pct_ingreso", "costo", "mobile_data_cost"),
}


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching (accents dropped, alphanumerics only).
    """

    return "".join(ch for ch in strip_accents(header.strip()).lower() if ch.isalnum())


@dataclass(frozen=True)
class MappingResolution:
    """
    Final resolved mapping metadata.
    """

    canonical_to_source: dict[str, str]
    source_headers: tuple[str, ...]
    match_strategies: dict[str, str]


class UploadSchemaMapper:
    """
    Resolves uploaded file headers into canonical indicator fields.
    """

    def __init__(
        self,
        *,
        aliases: Mapping[str, Sequence[str]] | None = None,
        validator: MappingValidator | None = None,
        fuzzy_threshold: float = 0.84,
    ) -> None:
        self._aliases: dict[str, tuple[str, ...]] = {
            canonical: tuple(values)
            for canonical, values in (aliases or DEFAULT_COLUMN_ALIASES).items()
        }
        self._validator = validator or MappingValidator(
            required_fields=REQUIRED_CANONICAL_FIELDS,
            canonical_fields=CANONICAL_FIELDS,
        )
        self._fuzzy_threshold = max(0.0, min(1.0, fuzzy_threshold))

    def resolve_mapping(
        self,
        headers: Sequence[str],
        *,
        manual_overrides: Mapping[str, str] | None = None,
    ) -> MappingResolution:
        """
        Resolve canonical-to-source mapping from headers and optional overrides.

        Canonical fields are matched in declaration order: manual override,
        then exact name or alias, then the closest fuzzy match above the
        threshold. A source column is never mapped twice.
        """

        source_headers = tuple(header for header in headers if header and header.strip())
        if not source_headers:
            raise SchemaMappingError(
                message="File headers are empty; cannot resolve column mapping.",
                errors=[
                    MappingErrorDetail(
                        code="empty_headers",
                        message="No column headers were provided.",
                    )
                ],
            )

        normalized_header_lookup: dict[str, str] = {}
        for header in source_headers:
            key = normalize_header(header)
            if key and key not in normalized_header_lookup:
                normalized_header_lookup[key] = header

        resolved: dict[str, str] = {}
        strategies: dict[str, str] = {}
        mapping_errors: list[MappingErrorDetail] = []

        for canonical_field, source_column in (manual_overrides or {}).items():
            normalized_canonical = canonical_field.strip()
            if normalized_canonical not in CANONICAL_FIELDS:
                mapping_errors.append(
                    MappingErrorDetail(
                        code="invalid_override_field",
                        message="Manual override contains unknown canonical field.",
                        canonical_field=normalized_canonical,
                        source_column=source_column,
                    )
                )
                continue

            matched_source = normalized_header_lookup.get(normalize_header(source_column))
            if matched_source is None:
                mapping_errors.append(
                    MappingErrorDetail(
                        code="override_source_not_found",
                        message="Manual override points to a column not present in the file.",
                        canonical_field=normalized_canonical,
                        source_column=source_column,
                        context={"source_headers": list(source_headers)},
                    )
                )
                continue

            resolved[normalized_canonical] = matched_source
            strategies[normalized_canonical] = "override"

        used_headers = set(resolved.values())
        for canonical_field in CANONICAL_FIELDS:
            if canonical_field in resolved:
                continue

            exact = self._find_exact_or_alias_match(
                canonical_field=canonical_field,
                normalized_header_lookup=normalized_header_lookup,
                used_headers=used_headers,
            )
            if exact is not None:
                resolved[canonical_field] = exact
                strategies[canonical_field] = "exact_or_alias"
                used_headers.add(exact)
                continue

            fuzzy_match = self._find_best_fuzzy_match(
                canonical_field=canonical_field,
                normalized_header_lookup=normalized_header_lookup,
                used_headers=used_headers,
            )
            if fuzzy_match is not None:
                resolved[canonical_field] = fuzzy_match
                strategies[canonical_field] = "fuzzy"
                used_headers.add(fuzzy_match)

        self._validator.validate(
            mapping=resolved,
            source_headers=source_headers,
            pre_errors=mapping_errors,
        )

        return MappingResolution(
            canonical_to_source=resolved,
            source_headers=source_headers,
            match_strategies=strategies,
        )

    def map_row(
        self,
        *,
        raw_row: Mapping[str, Any],
        mapping: MappingResolution,
    ) -> dict[str, Any]:
        """
        Map one source row into canonical raw field values.
        """

        return {
            canonical_field: raw_row.get(source_column)
            for canonical_field, source_column in mapping.canonical_to_source.items()
        }

    def _find_exact_or_alias_match(
        self,
        *,
        canonical_field: str,
        normalized_header_lookup: Mapping[str, str],
        used_headers: set[str],
    ) -> str | None:
        candidates = (
            canonical_field,
            *self._aliases.get(canonical_field, ()),
        )
        for candidate in candidates:
            match = normalized_header_lookup.get(normalize_header(candidate))
            if match and match not in used_headers:
                return match
        return None

    def _find_best_fuzzy_match(
        self,
        *,
        canonical_field: str,
        normalized_header_lookup: Mapping[str, str],
        used_headers: set[str],
    ) -> str | None:
        alias_candidates = [canonical_field, *self._aliases.get(canonical_field, ())]
        normalized_candidates = [normalize_header(item) for item in alias_candidates if normalize_header(item)]
        if not normalized_candidates:
            return None

        best_header: str | None = None
        best_score = 0.0
        for header_norm, header_raw in normalized_header_lookup.items():
            if header_raw in used_headers:
                continue
            for candidate in normalized_candidates:
                score = SequenceMatcher(None, header_norm, candidate).ratio()
                if score > best_score:
                    best_score = score
                    best_header = header_raw

        if best_header is not None and best_score >= self._fuzzy_threshold:
            return best_header
        return None
