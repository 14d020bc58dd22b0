"""Instrument snapshot as returned by the market data provider."""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _num(val: Any) -> Optional[float]:
    """Coerce a JSON value to float; anything absent or non-numeric is None."""
    if val is None or isinstance(val, bool):
        return None
    try:
        num = float(val)
    except (TypeError, ValueError):
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def _int(val: Any) -> Optional[int]:
    num = _num(val)
    return int(num) if num is not None else None


def _str(val: Any) -> Optional[str]:
    return str(val) if val is not None else None


def _series(raw: Any) -> Optional[Tuple[float, ...]]:
    if not isinstance(raw, dict):
        return None
    prices = raw.get("price")
    if not isinstance(prices, list):
        return None
    series = tuple(p for p in (_num(v) for v in prices) if p is not None)
    if len(series) < len(prices):
        logger.debug("Dropped %d non-numeric sparkline samples", len(prices) - len(series))
    return series


@dataclass(frozen=True)
class InstrumentSnapshot:
    symbol: str
    name: str
    current_price: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    change_1h: Optional[float] = None
    change_24h: Optional[float] = None
    change_7d: Optional[float] = None
    change_14d: Optional[float] = None
    change_30d: Optional[float] = None
    change_60d: Optional[float] = None
    change_200d: Optional[float] = None
    change_1y: Optional[float] = None
    market_cap_rank: Optional[int] = None
    market_cap: Optional[float] = None
    total_volume: Optional[float] = None
    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = None
    max_supply: Optional[float] = None
    ath: Optional[float] = None
    ath_date: Optional[str] = None
    atl: Optional[float] = None
    atl_date: Optional[str] = None
    last_updated: Optional[str] = None
    sparkline: Optional[Tuple[float, ...]] = None

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "InstrumentSnapshot":
        """Build a snapshot from one /coins/markets JSON object."""
        if not isinstance(d, dict):
            raise ValueError(f"expected object, got {type(d).__name__}")
        symbol, name = d.get("symbol"), d.get("name")
        if symbol is None or name is None:
            raise ValueError("row is missing symbol or name")

        def pct(h: str) -> Optional[float]:
            return _num(d.get(f"price_change_percentage_{h}_in_currency"))

        return cls(
            symbol=str(symbol),
            name=str(name),
            current_price=_num(d.get("current_price")),
            high_24h=_num(d.get("high_24h")),
            low_24h=_num(d.get("low_24h")),
            price_change_percentage_24h=_num(d.get("price_change_percentage_24h")),
            change_1h=pct("1h"),
            change_24h=pct("24h"),
            change_7d=pct("7d"),
            change_14d=pct("14d"),
            change_30d=pct("30d"),
            change_60d=pct("60d"),
            change_200d=pct("200d"),
            change_1y=pct("1y"),
            market_cap_rank=_int(d.get("market_cap_rank")),
            market_cap=_num(d.get("market_cap")),
            total_volume=_num(d.get("total_volume")),
            circulating_supply=_num(d.get("circulating_supply")),
            total_supply=_num(d.get("total_supply")),
            max_supply=_num(d.get("max_supply")),
            ath=_num(d.get("ath")),
            ath_date=_str(d.get("ath_date")),
            atl=_num(d.get("atl")),
            atl_date=_str(d.get("atl_date")),
            last_updated=_str(d.get("last_updated")),
            sparkline=_series(d.get("sparkline_in_7d")),
        )

    def changes(self) -> List[Tuple[str, Optional[float]]]:
        return [
            ("1H", self.change_1h),
            ("24H", self.change_24h),
            ("7D", self.change_7d),
            ("14D", self.change_14d),
            ("30D", self.change_30d),
            ("60D", self.change_60d),
            ("200D", self.change_200d),
            ("1Y", self.change_1y),
        ]

    def change_for(self, label: str) -> Optional[float]:
        """Percentage change for a timeframe label such as '24H'."""
        return dict(self.changes()).get(label)
