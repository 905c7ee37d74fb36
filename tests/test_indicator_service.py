"""
tests/test_indicator_service.py

Pytest unit tests for IndicatorService with an in-memory connector.
"""

from __future__ import annotations

from typing import Any

import pytest

from app.connectors import (
    BANDWIDTH_BPS_PER_USER,
    FIXED_BROADBAND_PER_100,
    INTERNET_USERS_PCT,
    BaseConnector,
    ConnectorRequestError,
)
from app.services.indicator_service import (
    SPEED_SOURCE_BANDWIDTH,
    SPEED_SOURCE_PROXY,
    IndicatorService,
    MissingCountriesError,
    UnknownCountryError,
    UpstreamUnavailableError,
    parse_country_list,
)


def _series(*points: tuple[str, Any]) -> list[dict[str, Any]]:
    return [{"country": {"id": "XX"}, "date": date, "value": value} for date, value in points]


class FakeConnector(BaseConnector):
    def __init__(self, data: dict[tuple[str, str], list[dict[str, Any]]], *, fail: bool = False) -> None:
        self.source = "fake"
        self._data = data
        self._fail = fail
        self.calls: list[tuple[str, str]] = []

    def fetch_series(self, country_code: str, indicator_code: str) -> list[dict[str, Any]]:
        self.calls.append((country_code, indicator_code))
        if self._fail:
            raise ConnectorRequestError("fake: request failed after retries.")
        return self._data.get((country_code, indicator_code), [])


@pytest.fixture()
def connector() -> FakeConnector:
    return FakeConnector(
        {
            ("CHL", INTERNET_USERS_PCT): _series(("2023", None), ("2022", 90.2), ("2021", 88.3)),
            ("CHL", BANDWIDTH_BPS_PER_USER): _series(("2022", 24_000_000)),
            ("CHL", FIXED_BROADBAND_PER_100): _series(("2022", 23.1)),
            ("COL", INTERNET_USERS_PCT): _series(("2022", 77.3)),
            ("COL", FIXED_BROADBAND_PER_100): _series(("2022", 17.0)),
        }
    )


class TestParseCountryList:
    def test_splits_and_trims(self) -> None:
        assert parse_country_list(" Chile, ,Colombia ,") == ["Chile", "Colombia"]

    def test_none_and_sequences(self) -> None:
        assert parse_country_list(None) == []
        assert parse_country_list(["Chile", "  "]) == ["Chile"]


class TestFetchIndicators:
    def test_builds_one_row_per_country(self, connector: FakeConnector) -> None:
        result = IndicatorService(connector=connector).fetch_indicators("Chile,col")

        chile, colombia = result.rows
        assert chile.country == "Chile"
        assert chile.year == "2022"
        assert chile.access_internet_pct == 90.2
        assert chile.fixed_broadband_subs_per100 == 23.1
        assert chile.broadband_speed_mbps == pytest.approx(24.0)
        assert chile.mobile_data_cost_pct_income is None
        assert colombia.country == "Colombia"
        assert result.meta.resolved == ["CHL", "COL"]
        assert result.meta.requested == ["Chile", "col"]

    def test_requested_year_is_honoured(self, connector: FakeConnector) -> None:
        result = IndicatorService(connector=connector).fetch_indicators("Chile", "2021")

        assert result.rows[0].access_internet_pct == 88.3
        assert result.meta.per_country_year == {"CHL": "2021"}

    def test_fixed_broadband_proxy_when_bandwidth_missing(self, connector: FakeConnector) -> None:
        result = IndicatorService(connector=connector).fetch_indicators("Chile,Colombia")

        assert result.rows[1].broadband_speed_mbps == 17.0
        assert result.meta.speed_source == {
            "CHL": SPEED_SOURCE_BANDWIDTH,
            "COL": SPEED_SOURCE_PROXY,
        }

    def test_proxy_can_be_disabled(self, connector: FakeConnector) -> None:
        service = IndicatorService(connector=connector, speed_proxy_enabled=False)

        result = service.fetch_indicators("Colombia")

        assert result.rows[0].broadband_speed_mbps is None
        assert result.meta.speed_source == {"COL": SPEED_SOURCE_BANDWIDTH}

    def test_country_without_any_data_still_gets_a_row(self, connector: FakeConnector) -> None:
        result = IndicatorService(connector=connector).fetch_indicators("NZL")

        row = result.rows[0]
        assert row.country == "NZL"
        assert row.year is None
        assert row.access_internet_pct is None

    def test_missing_countries(self, connector: FakeConnector) -> None:
        with pytest.raises(MissingCountriesError):
            IndicatorService(connector=connector).fetch_indicators(" , ")
        assert connector.calls == []

    def test_unknown_country_rejects_before_fetching(self, connector: FakeConnector) -> None:
        with pytest.raises(UnknownCountryError) as exc_info:
            IndicatorService(connector=connector).fetch_indicators("Chile,Narnia,Atlantis")

        assert exc_info.value.names == ("Narnia", "Atlantis")
        assert connector.calls == []

    def test_upstream_failure_is_wrapped(self) -> None:
        service = IndicatorService(connector=FakeConnector({}, fail=True))

        with pytest.raises(UpstreamUnavailableError):
            service.fetch_indicators("Chile")
