import argparse
import logging
import queue
import sys
import threading
from typing import Callable, Optional

from rich.console import Console

from coindash.config import parse_config
from coindash.constants import APP_NAME, APP_VERSION
from coindash.logging_setup import setup_logging
from coindash.navigation import (
    move_up, move_down, page_up, page_down, go_to_top, go_to_bottom,
    reconcile_scroll, visible_rows_for_height,
)
from coindash.provider import CoinGeckoProvider, FetchResult
from coindash.scheduler import RefreshScheduler
from coindash.state import DashboardState
from coindash.terminal import (
    UP, DOWN, PAGE_UP, PAGE_DOWN, HOME, END, ESC, CTRL_C,
    TerminalError, terminal_session,
)
from coindash.ui import build_layout

logger = logging.getLogger(__name__)

NAVIGATION_KEYS = {
    UP: move_up, "k": move_up,
    DOWN: move_down, "j": move_down,
    PAGE_UP: page_up,
    PAGE_DOWN: page_down,
    "g": go_to_top, HOME: go_to_top,
    "G": go_to_bottom, END: go_to_bottom,
}
QUIT_KEYS = {"q", ESC, CTRL_C}
TIMEFRAME_KEYS = {"t", "T"}
REFRESH_KEYS = {"r", "R"}


def fetch_markets_safely(provider, vs_currency: str) -> FetchResult:
    """Run one provider call; any unexpected exception becomes a failed result."""
    try:
        return provider.fetch_markets(vs_currency)
    except Exception as e:
        logger.exception("Provider raised")
        return FetchResult.fail(str(e)[:80] or type(e).__name__)


class Dashboard:
    """The event loop: render, refresh when due, wait for a key, dispatch.

    In ``blocking`` mode the provider call runs inline and nothing else happens
    until it returns. In ``background`` mode it runs on a worker thread that
    posts its FetchResult to a queue; the loop drains the queue each iteration
    and applies the result on its own thread.
    """

    def __init__(self, provider, state: DashboardState, scheduler: RefreshScheduler,
                 render: Callable[[DashboardState], None],
                 poll_key: Callable[[float], Optional[str]],
                 terminal_height: Callable[[], int],
                 tick_rate: float = 0.2, fetch_mode: str = "background"):
        self.provider = provider
        self.state = state
        self.scheduler = scheduler
        self.render = render
        self.poll_key = poll_key
        self.terminal_height = terminal_height
        self.tick_rate = tick_rate
        self.blocking = fetch_mode == "blocking"
        self.results: "queue.Queue[FetchResult]" = queue.Queue()
        self.worker: Optional[threading.Thread] = None

    def run(self):
        while not self.state.should_quit:
            self.step()
        logger.info("Quit requested")

    def step(self):
        """One loop iteration."""
        self.render(self.state)
        self.collect_result()
        if self.scheduler.is_auto_refresh_due(self.state):
            logger.debug("Auto refresh due")
            self.refresh()
        key = self.poll_key(self.tick_rate)
        if key is not None:
            self.handle_key(key)

    def refresh(self) -> bool:
        """Start a fetch unless one is already in flight."""
        if not self.scheduler.begin_refresh(self.state):
            return False
        self.render(self.state)
        vs_currency = self.state.quote_currency
        if self.blocking:
            result = fetch_markets_safely(self.provider, vs_currency)
            self.scheduler.complete_refresh(self.state, result)
        else:
            self.worker = threading.Thread(target=self._fetch_in_background,
                                           args=(vs_currency,), daemon=True)
            self.worker.start()
        return True

    def _fetch_in_background(self, vs_currency: str):
        self.results.put(fetch_markets_safely(self.provider, vs_currency))

    def collect_result(self) -> bool:
        """Apply a finished background fetch, if any. Never blocks."""
        try:
            result = self.results.get_nowait()
        except queue.Empty:
            return False
        self.scheduler.complete_refresh(self.state, result)
        return True

    def handle_key(self, key: str):
        state = self.state
        rows = visible_rows_for_height(self.terminal_height())
        prev_selected = state.selected_index

        if key in QUIT_KEYS:
            state.should_quit = True
        elif key in NAVIGATION_KEYS:
            NAVIGATION_KEYS[key](state, rows)
        elif key in TIMEFRAME_KEYS:
            state.cycle_timeframe()
        elif key in REFRESH_KEYS:
            if not state.loading:
                self.refresh()
            else:
                logger.debug("Refresh ignored, fetch already in flight")

        if state.selected_index != prev_selected:
            reconcile_scroll(state, rows)
            state.refresh_chart()


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Terminal-based cryptocurrency price tracker",
        epilog="controls: up/k, down/j, PgUp/PgDn, g/G top/bottom, "
               "T cycle chart timeframe, r refresh, q/Esc quit",
    )
    parser.add_argument("-V", "--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("-c", "--currency", help="quote currency, e.g. usd, eur, btc")
    parser.add_argument("--config", default="", help="path to config.ini")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    config = parse_config(args.config)
    if args.currency:
        config.vs_currency = args.currency.strip().lower()
    setup_logging(config.log_level, config.log_file)
    logger.info("Starting %s %s (%s, refresh %ss, %s fetch)", APP_NAME, APP_VERSION,
                config.vs_currency, config.refresh_interval, config.fetch_mode)

    provider = CoinGeckoProvider(config.api_base, per_page=config.per_page,
                                 timeout=config.request_timeout)
    state = DashboardState(quote_currency=config.vs_currency)
    scheduler = RefreshScheduler(interval=config.refresh_interval)

    # First fetch happens before the screen switches, like any later refresh
    print(f"[{APP_NAME}] Fetching top {config.per_page} coins ({config.vs_currency})...")
    scheduler.complete_refresh(state, fetch_markets_safely(provider, state.quote_currency))
    if state.last_error:
        print(f"[warning] Could not fetch initial data: {state.last_error}")

    console = Console()
    try:
        with terminal_session(console, build_layout(state, console.width, console.height)) as (live, keys):
            def render(s: DashboardState):
                live.update(build_layout(s, console.width, console.height), refresh=True)

            dashboard = Dashboard(provider, state, scheduler, render, keys.poll,
                                  lambda: console.height,
                                  tick_rate=config.tick_rate, fetch_mode=config.fetch_mode)
            dashboard.run()
    except TerminalError as e:
        logger.error("%s", e)
        print(f"[error] {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    finally:
        provider.close()

    print(f"[{APP_NAME}] Goodbye.")
    return 0
