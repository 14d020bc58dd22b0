from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from coindash.chart import Timeframe, window_prices
from coindash.constants import DEFAULT_CURRENCY
from coindash.models import InstrumentSnapshot
from coindash.navigation import reconcile_scroll


@dataclass
class DashboardState:
    coins: Tuple[InstrumentSnapshot, ...] = ()
    selected_index: int = 0
    scroll_offset: int = 0
    timeframe: Timeframe = Timeframe.TWENTY_FOUR_HOURS
    chart_window: Tuple[float, ...] = ()   # derived, written only by refresh_chart()

    last_update: Optional[float] = None            # monotonic, for "updated Ns ago"
    loading: bool = True
    last_error: Optional[str] = None

    quote_currency: str = DEFAULT_CURRENCY
    viewport_rows: int = 1     # last visible row count seen by navigation
    should_quit: bool = False

    chart_source: Optional[Tuple[int, Timeframe]] = field(default=None, repr=False)

    def selected_coin(self) -> Optional[InstrumentSnapshot]:
        if 0 <= self.selected_index < len(self.coins):
            return self.coins[self.selected_index]
        return None

    def refresh_chart(self, force: bool = False):
        """Recompute chart_window from the selected coin and timeframe.

        Skipped when neither the selection nor the timeframe changed since
        the last derivation, unless ``force``.
        """
        key = (self.selected_index, self.timeframe)
        if not force and key == self.chart_source:
            return
        coin = self.selected_coin()
        self.chart_window = window_prices(coin.sparkline if coin else None, self.timeframe)
        self.chart_source = key

    def cycle_timeframe(self):
        self.timeframe = self.timeframe.next()
        self.refresh_chart()

    def replace_coins(self, coins: Sequence[InstrumentSnapshot]):
        """Swap in a freshly fetched list, keeping selection and scroll valid."""
        self.coins = tuple(coins)
        self.selected_index = max(0, min(self.selected_index, len(self.coins) - 1))
        if not self.coins:
            self.scroll_offset = 0
        else:
            reconcile_scroll(self, self.viewport_rows)
        self.refresh_chart(force=True)

    def chart_status(self) -> str:
        if self.chart_window:
            return "ready"
        if self.loading:
            return "loading"
        return "empty"
