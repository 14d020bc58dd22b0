"""CoinGecko provider — the only module that talks HTTP."""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import requests

from coindash.constants import (
    COINGECKO_API_BASE, CHANGE_HORIZONS, DEFAULT_PER_PAGE, DEFAULT_TIMEOUT, USER_AGENT,
)
from coindash.models import InstrumentSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one provider call: a ranked coin list or an error message."""
    coins: Tuple[InstrumentSnapshot, ...] = ()
    error: Optional[str] = None

    @classmethod
    def ok(cls, coins) -> "FetchResult":
        return cls(coins=tuple(coins))

    @classmethod
    def fail(cls, message: str) -> "FetchResult":
        return cls(error=message or "unknown error")

    @property
    def succeeded(self) -> bool:
        return self.error is None


class CoinGeckoProvider:
    """Wraps the /coins/markets endpoint so no other module needs requests."""

    def __init__(self, base_url: str = COINGECKO_API_BASE, per_page: int = DEFAULT_PER_PAGE,
                 timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self._base_url = base_url.rstrip("/")
        self._per_page = per_page
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })

    def close(self):
        self._session.close()

    def fetch_markets(self, vs_currency: str) -> FetchResult:
        """Top coins by market cap, priced in ``vs_currency``. Never raises for I/O."""
        url = f"{self._base_url}/coins/markets"
        params = {
            "vs_currency": vs_currency,
            "order": "market_cap_desc",
            "per_page": self._per_page,
            "page": 1,
            "sparkline": "true",
            "price_change_percentage": ",".join(CHANGE_HORIZONS),
        }
        logger.debug("GET %s vs_currency=%s per_page=%s", url, vs_currency, self._per_page)
        try:
            resp = self._session.get(url, params=params, timeout=self._timeout)
        except requests.Timeout:
            return FetchResult.fail(f"request timed out after {self._timeout:g}s")
        except requests.ConnectionError as e:
            return FetchResult.fail(f"connection error: {_short(e)}")
        except requests.RequestException as e:
            return FetchResult.fail(_short(e))

        if resp.status_code == 429:
            return FetchResult.fail("Rate limited (429)")
        if not 200 <= resp.status_code < 300:
            return FetchResult.fail(f"API request failed with status: {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError:
            return FetchResult.fail("malformed response: invalid JSON")
        return self._parse_markets(payload)

    @staticmethod
    def _parse_markets(payload: Any) -> FetchResult:
        if not isinstance(payload, list):
            return FetchResult.fail(f"malformed response: expected list, got {type(payload).__name__}")
        coins = []
        for i, row in enumerate(payload):
            try:
                coins.append(InstrumentSnapshot.from_api(row))
            except ValueError as e:
                return FetchResult.fail(f"malformed response: row {i}: {e}")
        return FetchResult.ok(coins)


def _short(e: Exception, limit: int = 80) -> str:
    return str(e)[:limit] or type(e).__name__
