import time
from typing import List, Optional, Sequence

from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from coindash.chart import price_bounds
from coindash.constants import (
    COIN_COLUMNS, CHART_HEIGHT_DIVISOR, FOOTER_ROWS,
    BORDER_STYLE, HEADER_STYLE, POSITIVE_STYLE, NEGATIVE_STYLE,
    SELECTED_STYLE, TEXT_STYLE, MUTED_STYLE, CHART_STYLE,
)
from coindash.formatting import (
    fmt_price, fmt_pct, fmt_large_number, fmt_date, axis_label,
    supply_ratio, fmt_supply_bar, fmt_ago,
)
from coindash.navigation import visible_rows_for_height
from coindash.state import DashboardState

BLOCKS = " ▁▂▃▄▅▆▇█"


def _panel(body, title: str) -> Panel:
    return Panel(body, title=Text(f" {title} ", style=HEADER_STYLE),
                 title_align="left", border_style=BORDER_STYLE)


def _resample(values: Sequence[float], width: int) -> List[float]:
    """Fit ``values`` into ``width`` columns (bucket means, or as-is if narrower)."""
    n = len(values)
    if n <= width:
        return list(values)
    out = []
    for col in range(width):
        lo = col * n // width
        hi = max(lo + 1, (col + 1) * n // width)
        bucket = values[lo:hi]
        out.append(sum(bucket) / len(bucket))
    return out


def render_chart(window: Sequence[float], width: int, rows: int) -> Text:
    """Block-character column chart of ``window``, ``rows`` lines tall."""
    rows = max(1, rows)
    cols = _resample(window, max(1, width))
    low, high = price_bounds(window)
    span = high - low
    levels = rows * (len(BLOCKS) - 1)
    heights = []
    for v in cols:
        frac = (v - low) / span if span > 0 else 0.5
        heights.append(max(1, round(frac * levels)))

    text = Text(style=CHART_STYLE)
    for line in range(rows, 0, -1):
        base = (line - 1) * (len(BLOCKS) - 1)
        chars = []
        for h in heights:
            fill = min(max(h - base, 0), len(BLOCKS) - 1)
            chars.append(BLOCKS[fill])
        text.append("".join(chars))
        if line > 1:
            text.append("\n")
    return text


def build_chart_panel(state: DashboardState, width: int, rows: int) -> Panel:
    coin = state.selected_coin()
    change_info = ""
    if coin is not None:
        change = coin.change_for(state.timeframe.label)
        if change is not None:
            change_info = f" ▲ {change:.2f}%" if change >= 0 else f" ▼ {abs(change):.2f}%"
    title = f"Price Chart ({state.timeframe.label}{change_info}) [T to cycle]"

    status = state.chart_status()
    if status != "ready":
        msg = "Loading chart data..." if status == "loading" else "No chart data available"
        return _panel(Text(msg, style=MUTED_STYLE), title)

    low, high = min(state.chart_window), max(state.chart_window)
    top, bottom = axis_label(high), axis_label(low)
    label_w = max(len(top), len(bottom)) + 1
    plot = render_chart(state.chart_window, width - label_w - 4, rows - 2)

    axis = Table.grid(expand=True)
    axis.add_column(width=label_w, justify="right", style=MUTED_STYLE)
    axis.add_column(ratio=1, no_wrap=True)
    labels = [""] * max(1, rows - 2)
    labels[0] = top
    labels[-1] = bottom
    axis.add_row(Text("\n".join(labels)), plot)
    return _panel(axis, title)


def build_coin_table(state: DashboardState, visible_rows: int) -> Panel:
    table = Table(expand=True, box=None, padding=(0, 1), header_style=HEADER_STYLE)
    for label, justify, min_width in COIN_COLUMNS:
        if label == "Price":
            label = f"Price ({state.quote_currency.upper()})"
        table.add_column(label, justify=justify, min_width=min_width, no_wrap=True)

    end = state.scroll_offset + visible_rows
    for i, coin in enumerate(state.coins[state.scroll_offset:end], start=state.scroll_offset):
        rank = str(coin.market_cap_rank) if coin.market_cap_rank is not None else "—"
        table.add_row(
            Text(rank, style=MUTED_STYLE),
            Text(coin.symbol.upper(), style=TEXT_STYLE),
            fmt_price(coin.current_price),
            fmt_pct(coin.change_1h),
            fmt_pct(coin.change_24h),
            fmt_pct(coin.change_7d),
            fmt_large_number(coin.market_cap, style=MUTED_STYLE),
            style=SELECTED_STYLE if i == state.selected_index else None,
        )

    n = len(state.coins)
    position = f"{state.selected_index + 1}/{n}" if n else "0/0"
    return _panel(table, f"Top {n} Coins by Market Cap ({position})")


def _no_coin() -> Text:
    return Text("No coin selected", style=MUTED_STYLE)


def _field_table() -> Table:
    t = Table.grid(padding=(0, 1))
    t.add_column(style=MUTED_STYLE, no_wrap=True)
    t.add_column(no_wrap=True)
    return t


def build_price_panel(state: DashboardState) -> Panel:
    cur = state.quote_currency.upper()
    coin = state.selected_coin()
    if coin is None:
        return _panel(_no_coin(), f"Live Price ({cur})")

    text = Text()
    text.append(f"{coin.symbol.upper()} ", style=HEADER_STYLE)
    text.append(coin.name, style=TEXT_STYLE)
    text.append("\n")
    text.append_text(fmt_price(coin.current_price, style=f"bold {TEXT_STYLE}"))
    text.append(" ")
    text.append_text(fmt_pct(coin.price_change_percentage_24h))
    text.append("\nH: ", style=MUTED_STYLE)
    text.append_text(fmt_price(coin.high_24h, style=POSITIVE_STYLE))
    text.append(" L: ", style=MUTED_STYLE)
    text.append_text(fmt_price(coin.low_24h, style=NEGATIVE_STYLE))
    return _panel(text, f"Live Price ({cur})")


def build_changes_panel(state: DashboardState) -> Panel:
    coin = state.selected_coin()
    if coin is None:
        return _panel(_no_coin(), "Changes")
    t = _field_table()
    for label, value in coin.changes():
        t.add_row(label, fmt_pct(value))
    return _panel(t, "Changes")


def build_details_panel(state: DashboardState) -> Panel:
    coin = state.selected_coin()
    if coin is None:
        return _panel(_no_coin(), "Details")
    cur = state.quote_currency.upper()
    rank = str(coin.market_cap_rank) if coin.market_cap_rank is not None else "N/A"

    t = _field_table()
    t.add_row("Name", Text(coin.name, style=TEXT_STYLE))
    t.add_row("Symbol", Text(coin.symbol.upper(), style=TEXT_STYLE))
    t.add_row("Rank", Text(rank, style=HEADER_STYLE))
    t.add_row("MarketCap", fmt_large_number(coin.market_cap).append(f" {cur}"))
    t.add_row("ATH", fmt_large_number(coin.ath, style=POSITIVE_STYLE).append(f" {cur}"))
    t.add_row("ATHDate", Text(fmt_date(coin.ath_date), style=MUTED_STYLE))
    t.add_row("ATL", fmt_price(coin.atl, style=NEGATIVE_STYLE).append(f" {cur}"))
    t.add_row("ATLDate", Text(fmt_date(coin.atl_date), style=MUTED_STYLE))
    t.add_row("TotalVolume", fmt_large_number(coin.total_volume).append(f" {cur}"))
    t.add_row("LastUpdate", Text(fmt_date(coin.last_updated), style=MUTED_STYLE))
    return _panel(t, "Details")


def build_supply_panel(state: DashboardState) -> Panel:
    coin = state.selected_coin()
    if coin is None:
        return _panel(_no_coin(), "Supply")

    t = _field_table()
    t.add_row("Circulating", fmt_large_number(coin.circulating_supply, style=POSITIVE_STYLE))
    t.add_row("Total", fmt_large_number(coin.total_supply))
    if coin.max_supply is None:
        t.add_row("Max Supply", Text("∞ Unlimited", style=HEADER_STYLE))
    else:
        t.add_row("Max Supply", fmt_large_number(coin.max_supply, style=HEADER_STYLE))
    ratio = supply_ratio(coin.circulating_supply, coin.total_supply, coin.max_supply)
    t.add_row("", fmt_supply_bar(ratio))
    return _panel(t, "Supply")


def status_text(state: DashboardState, now: Optional[float] = None) -> Text:
    """Refresh status for the footer: loading, age of data, and the last error."""
    now = time.monotonic() if now is None else now
    if state.loading:
        text = Text("Loading...", style=MUTED_STYLE)
    elif state.last_update is not None:
        text = Text(fmt_ago(now - state.last_update), style=MUTED_STYLE)
    else:
        text = Text("Not updated", style=MUTED_STYLE)
    if state.last_error:
        text.append("  ")
        text.append(f"⚠ {state.last_error}", style=f"bold {NEGATIVE_STYLE}")
    return text


def build_footer(state: DashboardState, now: Optional[float] = None) -> Panel:
    help_text = Text(" ")
    for key, action in (("↑/k", "Up"), ("↓/j", "Down"), ("PgUp/PgDn", "Page"),
                        ("g/G", "Top/Bottom"), ("T", "Timeframe"), ("r", "Refresh"),
                        ("q", "Quit")):
        help_text.append(key, style=HEADER_STYLE)
        help_text.append(f" {action}  ", style=TEXT_STYLE)
    help_text.append_text(status_text(state, now))
    help_text.no_wrap = True
    help_text.overflow = "ellipsis"
    return Panel(help_text, border_style=BORDER_STYLE)


def build_layout(state: DashboardState, width: int, height: int,
                 now: Optional[float] = None) -> Layout:
    """Compose the full screen. Reads state only."""
    chart_rows = height // CHART_HEIGHT_DIVISOR
    visible_rows = visible_rows_for_height(height)

    layout = Layout()
    layout.split_column(
        Layout(name="chart", size=chart_rows),
        Layout(name="main"),
        Layout(name="footer", size=FOOTER_ROWS),
    )
    layout["chart"].update(build_chart_panel(state, width, chart_rows))
    layout["footer"].update(build_footer(state, now))

    info = Layout()
    info.split_column(
        Layout(build_price_panel(state), name="price", size=5),
        Layout(build_changes_panel(state), name="changes", size=10),
        Layout(build_details_panel(state), name="details", size=12),
        Layout(build_supply_panel(state), name="supply", minimum_size=6),
    )
    layout["main"].split_row(
        Layout(build_coin_table(state, visible_rows), name="coins"),
        Layout(info, name="info"),
    )
    return layout
