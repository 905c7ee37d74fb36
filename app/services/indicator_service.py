"""
app/services/indicator_service.py

Builds comparison input rows from the World Bank WDI API.

Flow per request:

    1. Split and validate the requested country list.
    2. Resolve every name to ISO-3; any unknown name rejects the request
       before a single network call is made.
    3. Fetch usage, bandwidth and fixed-broadband series per country and
       pick the requested period (or the latest available one).
    4. Convert bandwidth from bits/s to Mbps; optionally fall back to the
       fixed-broadband figure as a capacity proxy when bandwidth is missing.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Sequence

from app.config import get_external_http_settings, get_world_bank_settings
from app.connectors import (
    BANDWIDTH_BPS_PER_USER,
    FIXED_BROADBAND_PER_100,
    INTERNET_USERS_PCT,
    BaseConnector,
    ConnectorRequestError,
    WorldBankConnector,
    pick_observation,
)
from app.connectors.world_bank_connector import BITS_PER_MEGABIT
from app.domain.countries import display_name, resolve_iso3
from app.domain.ingestion import IndicatorFetchMeta, IndicatorFetchResult, Observation
from comparison.models import InputRow

logger = logging.getLogger(__name__)

SPEED_SOURCE_BANDWIDTH = "bandwidth_bps_per_user"
SPEED_SOURCE_PROXY = "fixed_broadband_subs_per100 (proxy)"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class MissingCountriesError(ValueError):
    """
    Raised when the request names no country at all.
    """


class UnknownCountryError(ValueError):
    """
    Raised when one or more requested names cannot be resolved to ISO-3.
    """

    def __init__(self, names: Sequence[str]) -> None:
        self.names = tuple(names)
        super().__init__(f"Unrecognized country: {', '.join(self.names)}.")


class UpstreamUnavailableError(RuntimeError):
    """
    Raised when the indicator source cannot be reached or answers with an error.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


def parse_country_list(countries: str | Sequence[str] | None) -> list[str]:
    """
    Split a comma-separated list (or clean a sequence) dropping blank entries.
    """

    if countries is None:
        return []
    parts = countries.split(",") if isinstance(countries, str) else list(countries)
    return [part.strip() for part in parts if part and part.strip()]


class IndicatorService:
    """
    Resolves countries and assembles one InputRow per resolved code.
    """

    def __init__(
        self,
        *,
        connector: BaseConnector,
        speed_proxy_enabled: bool = True,
    ) -> None:
        self._connector = connector
        self._speed_proxy_enabled = speed_proxy_enabled

    def fetch_indicators(
        self,
        countries: str | Sequence[str] | None,
        year: str | int | None = None,
    ) -> IndicatorFetchResult:
        """
        Fetch indicator rows for the requested countries.

        Raises:
            MissingCountriesError: No country was provided.
            UnknownCountryError: At least one name did not resolve.
            UpstreamUnavailableError: The indicator source failed.
        """

        requested = parse_country_list(countries)
        if not requested:
            raise MissingCountriesError("At least one country is required.")

        resolved_pairs = [(name, resolve_iso3(name)) for name in requested]
        unknown = [name for name, code in resolved_pairs if code is None]
        if unknown:
            raise UnknownCountryError(unknown)

        codes = [code for _, code in resolved_pairs if code is not None]
        rows: list[InputRow] = []
        per_country_year: dict[str, str | None] = {}
        speed_source: dict[str, str] = {}

        try:
            for code in codes:
                row, source = self._build_row(code, year)
                rows.append(row)
                per_country_year[code] = row.year
                speed_source[code] = source
        except ConnectorRequestError as exc:
            raise UpstreamUnavailableError(str(exc)) from exc

        logger.info(
            "Indicator rows fetched requested=%s resolved=%s year=%s",
            len(requested),
            len(codes),
            year,
        )

        return IndicatorFetchResult(
            rows=rows,
            meta=IndicatorFetchMeta(
                requested=requested,
                resolved=codes,
                per_country_year=per_country_year,
                speed_source=speed_source,
            ),
        )

    def _build_row(self, code: str, year: str | int | None) -> tuple[InputRow, str]:
        users = self._observe(code, INTERNET_USERS_PCT, year)
        bandwidth = self._observe(code, BANDWIDTH_BPS_PER_USER, year)
        broadband = self._observe(code, FIXED_BROADBAND_PER_100, year)

        speed_mbps = bandwidth.value / BITS_PER_MEGABIT if bandwidth.value is not None else None
        source = SPEED_SOURCE_BANDWIDTH
        if speed_mbps is None and self._speed_proxy_enabled and broadband.value is not None:
            speed_mbps = broadband.value
            source = SPEED_SOURCE_PROXY

        row = InputRow(
            country=display_name(code),
            year=users.period or bandwidth.period or broadband.period,
            access_internet_pct=users.value,
            fixed_broadband_subs_per100=broadband.value,
            broadband_speed_mbps=speed_mbps,
            mobile_data_cost_pct_income=None,
        )
        return row, source

    def _observe(self, code: str, indicator: str, year: str | int | None) -> Observation:
        series = self._connector.fetch_series(code, indicator)
        return pick_observation(series, year)


@lru_cache(maxsize=1)
def get_indicator_service() -> IndicatorService:
    """
    Build and cache the indicator service with env-driven settings.
    """

    settings = get_world_bank_settings()
    connector = WorldBankConnector(
        settings=settings,
        http_settings=get_external_http_settings(),
    )
    return IndicatorService(
        connector=connector,
        speed_proxy_enabled=settings.speed_proxy_enabled,
    )
