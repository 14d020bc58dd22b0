from typing import Optional

from rich.text import Text

from coindash.constants import (
    POSITIVE_STYLE, NEGATIVE_STYLE, MUTED_STYLE, TEXT_STYLE, CHART_STYLE,
)


def price_str(val: float) -> str:
    if val >= 1.0:
        return f"{val:,.2f}"
    if val >= 0.01:
        return f"{val:.4f}"
    return f"{val:.8f}"


def fmt_price(val: Optional[float], style: str = TEXT_STYLE) -> Text:
    if val is None:
        return Text("N/A", style=MUTED_STYLE)
    return Text(price_str(val), style=style)


def fmt_pct(val: Optional[float]) -> Text:
    if val is None:
        return Text("N/A", style=MUTED_STYLE)
    if val >= 0:
        return Text(f"▲ {val:.2f}%", style=POSITIVE_STYLE)
    return Text(f"▼ {abs(val):.2f}%", style=NEGATIVE_STYLE)


def large_number(val: float) -> str:
    if val >= 1_000_000_000_000:
        return f"{val / 1_000_000_000_000:.2f}T"
    if val >= 1_000_000_000:
        return f"{val / 1_000_000_000:.2f}B"
    if val >= 1_000_000:
        return f"{val / 1_000_000:.2f}M"
    if val >= 1_000:
        return f"{val / 1_000:.2f}K"
    return f"{val:.2f}"


def fmt_large_number(val: Optional[float], style: str = TEXT_STYLE) -> Text:
    if val is None:
        return Text("N/A", style=MUTED_STYLE)
    return Text(large_number(val), style=style)


def fmt_date(val: Optional[str]) -> str:
    """ISO-8601 timestamp from the API -> 'YYYY-MM-DD HH:MM'."""
    if not val:
        return "N/A"
    return val[:16].replace("T", " ")


def supply_ratio(circulating: Optional[float], total: Optional[float],
                 max_supply: Optional[float]) -> float:
    """Circulating supply as a percentage of max supply (or total when uncapped)."""
    circ = circulating or 0.0
    if max_supply is not None:
        return min(circ / max_supply * 100, 100.0) if max_supply > 0 else 0.0
    if total:
        return min(circ / total * 100, 100.0) if total > 0 else 0.0
    return 0.0


def fmt_supply_bar(ratio: float, width: int = 20) -> Text:
    filled = int(ratio / 100 * width)
    filled = max(0, min(filled, width))
    bar = Text("█" * filled + "░" * (width - filled), style=CHART_STYLE)
    bar.append(f" {ratio:.1f}%", style=TEXT_STYLE)
    return bar


def fmt_ago(seconds: float) -> str:
    secs = int(seconds)
    return f"Updated {secs}s ago" if secs < 60 else f"Updated {secs // 60}m ago"


def axis_label(val: float) -> str:
    """Chart axis label: compact above 1,000, full price precision below."""
    if val >= 1_000:
        return large_number(val)
    return price_str(val)
