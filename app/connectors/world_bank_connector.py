"""
app/connectors/world_bank_connector.py

World Bank WDI connector for digital-connectivity indicators.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

import requests

from app.config import ExternalHTTPSettings, WorldBankSettings
from app.connectors.base import BaseConnector
from app.domain.ingestion import Observation

logger = logging.getLogger(__name__)

# WDI indicator codes.
INTERNET_USERS_PCT = "IT.NET.USER.ZS"
BANDWIDTH_BPS_PER_USER = "IT.NET.BNDW.PC"
FIXED_BROADBAND_PER_100 = "IT.NET.BBND.P2"

BITS_PER_MEGABIT = 1_000_000.0


def parse_series_value(value: Any) -> float | None:
    """
    Coerce a WDI value to float, tolerating whitespace and a decimal comma.
    """

    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        text = "".join(str(value).split()).replace(",", ".", 1)
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def pick_observation(series: Sequence[Any] | None, period: str | int | None = None) -> Observation:
    """
    Choose one observation from a WDI series.

    Entries without country, date or value are ignored. The exact requested
    period wins when present; otherwise the latest available period is used.
    An empty series yields ``Observation(None, None)``.
    """

    candidates: list[Observation] = []
    for entry in series or ():
        if not isinstance(entry, dict):
            continue
        if not entry.get("country") or not entry.get("date") or entry.get("value") is None:
            continue
        candidates.append(
            Observation(period=str(entry["date"]), value=parse_series_value(entry["value"]))
        )

    if not candidates:
        return Observation(period=None, value=None)

    if period is not None and str(period).strip():
        wanted = str(period).strip()
        for candidate in candidates:
            if candidate.period == wanted:
                return candidate

    return max(candidates, key=lambda candidate: _period_sort_key(candidate.period))


def _period_sort_key(period: str | None) -> float:
    try:
        return float(period) if period is not None else float("-inf")
    except ValueError:
        return float("-inf")


class WorldBankConnector(BaseConnector):
    """
    Connector for indicator time series from the World Bank v2 API.
    """

    def __init__(
        self,
        *,
        settings: WorldBankSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="world_bank", http_settings=http_settings, session=session)
        self._settings = settings

    def fetch_series(self, country_code: str, indicator_code: str) -> list[dict[str, Any]]:
        endpoint = (
            f"{self._settings.base_url.rstrip('/')}/country/"
            f"{country_code}/indicator/{indicator_code}"
        )
        payload = self._get_series_json(
            endpoint,
            country_code=country_code,
            indicator_code=indicator_code,
            params={"format": "json", "per_page": self._settings.per_page},
            headers={
                "accept": "application/json",
                "user-agent": self._settings.user_agent,
            },
        )

        if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
            logger.info(
                "World Bank returned no series country=%s indicator=%s",
                country_code,
                indicator_code,
            )
            return []

        return payload[1]
