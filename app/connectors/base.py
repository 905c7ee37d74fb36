"""
app/connectors/base.py

Indicator connector abstraction: one GET per (country, indicator) series,
throttled and retried according to ExternalHTTPSettings.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Iterator

import requests

from app.config import ExternalHTTPSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ConnectorRequestError(RuntimeError):
    """
    Raised when an indicator series cannot be fetched.

    Carries the series coordinates so the caller can tell which country and
    indicator failed, and the last HTTP status when there was one.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        country_code: str | None = None,
        indicator_code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.country_code = country_code
        self.indicator_code = indicator_code
        self.status_code = status_code


class RequestThrottle:
    """
    Hands out request slots at least ``1 / rate_per_second`` seconds apart.

    Slots are reserved under a lock and waited for outside it, so request
    threads sharing one connector queue up instead of racing.
    """

    def __init__(self, rate_per_second: float) -> None:
        self._interval = 1.0 / rate_per_second if rate_per_second > 0 else 0.0
        self._lock = threading.Lock()
        self._next_slot = 0.0

    def wait(self) -> None:
        if self._interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self._interval
        if slot > now:
            time.sleep(slot - now)


def backoff_delays(settings: ExternalHTTPSettings) -> Iterator[float]:
    """
    Yield the pause before each retry: initial, initial * m, initial * m**2, ...
    """

    delay = settings.backoff_initial_seconds
    for _ in range(settings.max_retries):
        yield delay
        delay *= settings.backoff_multiplier


class BaseConnector(ABC):
    """
    Connector interface for fetching one indicator time series per country.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._http_settings = http_settings
        self._session = session or requests.Session()
        self._throttle = RequestThrottle(http_settings.rate_limit_per_second)

    @abstractmethod
    def fetch_series(self, country_code: str, indicator_code: str) -> list[dict[str, Any]]:
        """
        Fetch the raw observations of one indicator for one country.
        """

    def _get_series_json(
        self,
        url: str,
        *,
        country_code: str,
        indicator_code: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        GET one series endpoint and decode its JSON body.

        Raises:
            ConnectorRequestError: Non-retryable status, retries exhausted,
                or a body that is not JSON.
        """

        coordinates = {
            "source": self.source,
            "country_code": country_code,
            "indicator_code": indicator_code,
        }
        series = f"{country_code}/{indicator_code}"
        delays = backoff_delays(self._http_settings)
        attempts = 0

        while True:
            attempts += 1
            self._throttle.wait()
            status_code: int | None = None
            try:
                response = self._session.request(
                    method="GET",
                    url=url,
                    params=params,
                    headers=headers,
                    timeout=self._http_settings.timeout_seconds,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                failure: BaseException = exc
            else:
                status_code = response.status_code
                if status_code < 400:
                    break
                failure = requests.HTTPError(f"HTTP {status_code}", response=response)
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Series request rejected source=%s series=%s status=%s",
                        self.source,
                        series,
                        status_code,
                    )
                    raise ConnectorRequestError(
                        f"{self.source}: HTTP {status_code} for series {series}.",
                        status_code=status_code,
                        **coordinates,
                    ) from failure

            delay = next(delays, None)
            if delay is None:
                logger.error(
                    "Series request exhausted retries source=%s series=%s attempts=%s error=%s",
                    self.source,
                    series,
                    attempts,
                    failure,
                )
                raise ConnectorRequestError(
                    f"{self.source}: series {series} failed after {attempts} attempts.",
                    status_code=status_code,
                    **coordinates,
                ) from failure

            logger.warning(
                "Series request retry source=%s series=%s attempt=%s wait_seconds=%.2f error=%s",
                self.source,
                series,
                attempts,
                delay,
                failure,
            )
            time.sleep(delay)

        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(
                f"{self.source}: response for series {series} was not valid JSON.",
                status_code=status_code,
                **coordinates,
            ) from exc
