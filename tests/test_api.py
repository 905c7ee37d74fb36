"""
tests/test_api.py

HTTP contract tests for the comparison API.

The indicator service is overridden with an in-memory connector, so no
test reaches the network.
"""

from __future__ import annotations

import json
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from app import failure_codes
from app.connectors import (
    BANDWIDTH_BPS_PER_USER,
    FIXED_BROADBAND_PER_100,
    INTERNET_USERS_PCT,
    BaseConnector,
    ConnectorRequestError,
)
from app.main import app
from app.services.indicator_service import IndicatorService, get_indicator_service


def _series(date: str, value: float) -> list[dict[str, Any]]:
    return [{"country": {"id": "XX"}, "date": date, "value": value}]


class StaticConnector(BaseConnector):
    def __init__(self, data: dict[tuple[str, str], list[dict[str, Any]]], *, fail: bool = False) -> None:
        self.source = "static"
        self._data = data
        self._fail = fail

    def fetch_series(self, country_code: str, indicator_code: str) -> list[dict[str, Any]]:
        if self._fail:
            raise ConnectorRequestError("static: request failed after retries.")
        return self._data.get((country_code, indicator_code), [])


WDI_DATA = {
    ("CHL", INTERNET_USERS_PCT): _series("2022", 94.5),
    ("CHL", FIXED_BROADBAND_PER_100): _series("2022", 23.0),
    ("CHL", BANDWIDTH_BPS_PER_USER): _series("2022", 24_000_000),
    ("COL", INTERNET_USERS_PCT): _series("2022", 77.3),
    ("COL", FIXED_BROADBAND_PER_100): _series("2022", 17.0),
    ("COL", BANDWIDTH_BPS_PER_USER): _series("2022", 17_000_000),
}


@pytest.fixture()
def client() -> Iterator[TestClient]:
    app.dependency_overrides[get_indicator_service] = lambda: IndicatorService(
        connector=StaticConnector(WDI_DATA)
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# /api/health
# ---------------------------------------------------------------------------


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert isinstance(body["ts"], int)
    assert response.headers["cache-control"] == "no-store"


# ---------------------------------------------------------------------------
# /api/indicators
# ---------------------------------------------------------------------------


class TestIndicatorsEndpoint:
    def test_compares_requested_countries(self, client: TestClient) -> None:
        response = client.get("/api/indicators", params={"countries": "Chile,Colombia"})

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        body = response.json()
        assert [item["country"] for item in body["comparison"]] == ["Chile", "Colombia"]
        assert body["comparison"][0]["rank"] == 1
        assert body["comparison"][0]["score"] == 1.0
        assert body["comparison"][0]["norm"] == {"access": 1.0, "infra": 1.0, "capacity": 1.0}
        assert body["weights"]["access"] == pytest.approx(1 / 3)
        assert body["insights"][0] == "Top score is Chile (1)."
        assert len(body["raw"]) == 2
        assert body["charts"]["bars"]["labels"] == ["Chile", "Colombia"]
        assert len(body["charts"]["radar"]["datasets"]) == 2
        assert body["meta"]["resolved"]["resolved"] == ["CHL", "COL"]

    def test_missing_countries(self, client: TestClient) -> None:
        response = client.get("/api/indicators", params={"countries": " "})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == failure_codes.MISSING_COUNTRIES
        assert response.headers["cache-control"] == "no-store"

    def test_unknown_country(self, client: TestClient) -> None:
        response = client.get("/api/indicators", params={"countries": "Chile,Narnia"})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == failure_codes.UNKNOWN_COUNTRY
        assert detail["unknown"] == ["Narnia"]

    def test_upstream_failure_is_a_bad_gateway(self, client: TestClient) -> None:
        app.dependency_overrides[get_indicator_service] = lambda: IndicatorService(
            connector=StaticConnector({}, fail=True)
        )

        response = client.get("/api/indicators", params={"countries": "Chile"})

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == failure_codes.UPSTREAM_UNAVAILABLE


# ---------------------------------------------------------------------------
# /api/upload
# ---------------------------------------------------------------------------


class TestUploadEndpoint:
    def test_csv_upload(self, client: TestClient) -> None:
        content = "pais;acceso;banda_fija;velocidad\nChile;94,5;23;24\nColombia;77,3;17;17\n"

        response = client.post(
            "/api/upload",
            params={"year": "2023"},
            files={"file": ("datos.csv", content.encode("utf-8"), "text/csv")},
        )

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        body = response.json()
        assert body["comparison"][0]["country"] == "Chile"
        assert body["comparison"][0]["year"] == "2023"
        assert body["meta"]["upload"]["rows_accepted"] == 2
        assert body["meta"]["request"]["filename"] == "datos.csv"

    def test_json_upload(self, client: TestClient) -> None:
        payload = [{"country": "Chile", "access_internet_pct": 90}, {"country": "Peru", "access_internet_pct": 70}]

        response = client.post(
            "/api/upload",
            files={"file": ("data.json", json.dumps(payload).encode("utf-8"), "application/json")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["weights"] == {"access": 1.0, "infra": 0.0, "capacity": 0.0}
        assert [item["score"] for item in body["comparison"]] == [1.0, 0.0]

    def test_extreme_values_still_compare(self, client: TestClient) -> None:
        response = client.post(
            "/api/upload",
            files={"file": ("data.csv", b"country,access_internet_pct\nA,1e308\nB,-1e308\n", "text/csv")},
        )

        assert response.status_code == 200
        assert [item["score"] for item in response.json()["comparison"]] == [1.0, 0.0]

    def test_missing_country_column(self, client: TestClient) -> None:
        response = client.post(
            "/api/upload",
            files={"file": ("data.csv", b"name,access_internet_pct\nChile,90\n", "text/csv")},
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == failure_codes.INVALID_UPLOAD
        assert detail["message"].startswith("Invalid structure")

    def test_rejects_unsupported_file_type(self, client: TestClient) -> None:
        response = client.post(
            "/api/upload",
            files={"file": ("sheet.xlsx", b"PK\x03\x04", "application/octet-stream")},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == failure_codes.INVALID_UPLOAD

    def test_file_is_required(self, client: TestClient) -> None:
        response = client.post("/api/upload")

        assert response.status_code == 422
