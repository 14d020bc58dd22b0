import logging
import time
from typing import Callable, Optional

from coindash.constants import DEFAULT_REFRESH
from coindash.provider import FetchResult
from coindash.state import DashboardState

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Decides when a refresh is due and applies fetch outcomes to the state.

    ``state.loading`` is the mutual-exclusion flag: at most one fetch is in
    flight. The refresh timer restarts when a fetch completes, success or not,
    so a failing provider is retried once per interval rather than every tick.
    """

    def __init__(self, interval: float = DEFAULT_REFRESH,
                 clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self._clock = clock
        self.last_refresh = clock()

    def is_auto_refresh_due(self, state: DashboardState, now: Optional[float] = None) -> bool:
        if state.loading:
            return False
        now = self._clock() if now is None else now
        return now - self.last_refresh >= self.interval

    def begin_refresh(self, state: DashboardState) -> bool:
        """Mark a fetch as started. Returns False, changing nothing, if one is in flight."""
        if state.loading:
            return False
        state.loading = True
        return True

    def complete_refresh(self, state: DashboardState, result: FetchResult,
                         now: Optional[float] = None):
        now = self._clock() if now is None else now
        if result.succeeded:
            state.replace_coins(result.coins)
            state.last_update = now
            state.last_error = None
            logger.info("Fetched %d coins (%s)", len(result.coins), state.quote_currency)
        else:
            state.last_error = f"Failed to fetch data: {result.error}"
            logger.warning("Fetch failed: %s", result.error)
        state.loading = False
        self.last_refresh = now
