"""Chart window derivation from the provider's 7-day price series."""

from enum import Enum
from typing import Optional, Sequence, Tuple

from coindash.constants import SERIES_DAYS, SERIES_HOURS, ONE_HOUR_WIDEN


class Timeframe(Enum):
    ONE_HOUR = "1H"
    TWENTY_FOUR_HOURS = "24H"
    SEVEN_DAYS = "7D"

    @property
    def label(self) -> str:
        return self.value

    def next(self) -> "Timeframe":
        return _SUCCESSOR[self]


_SUCCESSOR = {
    Timeframe.ONE_HOUR: Timeframe.TWENTY_FOUR_HOURS,
    Timeframe.TWENTY_FOUR_HOURS: Timeframe.SEVEN_DAYS,
    Timeframe.SEVEN_DAYS: Timeframe.ONE_HOUR,
}


def window_prices(series: Optional[Sequence[float]], timeframe: Timeframe) -> Tuple[float, ...]:
    """Return the oldest-first slice of ``series`` to plot for ``timeframe``.

    The series is assumed evenly sampled across 7 days. 24H keeps the last
    day's worth of samples; 1H keeps four hours' worth so the shortest view
    still shows a trend instead of a single point.
    """
    if not series:
        return ()
    n = len(series)
    if timeframe is Timeframe.SEVEN_DAYS:
        take = n
    elif timeframe is Timeframe.TWENTY_FOUR_HOURS:
        take = max(1, n // SERIES_DAYS)
    else:
        take = max(1, n // SERIES_HOURS) * ONE_HOUR_WIDEN
    return tuple(series[-take:])


def price_bounds(window: Sequence[float]) -> Tuple[float, float]:
    """Axis bounds for a window: min/max padded by 10% of the range."""
    if not window:
        return (0.0, 0.0)
    low, high = min(window), max(window)
    pad = (high - low) * 0.1
    return (low - pad, high + pad)
