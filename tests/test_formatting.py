from coindash.formatting import (
    fmt_price, fmt_pct, fmt_large_number, fmt_date, fmt_supply_bar, fmt_ago,
    large_number, supply_ratio, axis_label,
)


def test_fmt_price_precision_by_magnitude():
    assert fmt_price(65432.1).plain == "65,432.10"
    assert fmt_price(0.5).plain == "0.5000"
    assert fmt_price(0.00001234).plain == "0.00001234"
    assert fmt_price(None).plain == "N/A"


def test_fmt_pct_arrows():
    assert fmt_pct(1.234).plain == "▲ 1.23%"
    assert fmt_pct(-0.5).plain == "▼ 0.50%"
    assert fmt_pct(0.0).plain == "▲ 0.00%"
    assert fmt_pct(None).plain == "N/A"


def test_large_number():
    assert large_number(1.28e12) == "1.28T"
    assert large_number(3.5e9) == "3.50B"
    assert large_number(12_300_000) == "12.30M"
    assert large_number(1500) == "1.50K"
    assert large_number(12.5) == "12.50"
    assert fmt_large_number(None).plain == "N/A"


def test_fmt_date():
    assert fmt_date("2021-11-10T14:24:19.604Z") == "2021-11-10 14:24"
    assert fmt_date(None) == "N/A"


def test_supply_ratio():
    assert supply_ratio(19.5e6, 19.5e6, 21e6) == 19.5e6 / 21e6 * 100
    assert supply_ratio(50, 100, None) == 50.0
    assert supply_ratio(150, 100, None) == 100.0
    assert supply_ratio(10, None, None) == 0.0
    assert supply_ratio(None, 100, None) == 0.0
    assert supply_ratio(10, 100, 0) == 0.0


def test_supply_bar():
    bar = fmt_supply_bar(50.0, width=10)
    assert bar.plain == "█████░░░░░ 50.0%"


def test_fmt_ago():
    assert fmt_ago(12.7) == "Updated 12s ago"
    assert fmt_ago(125) == "Updated 2m ago"


def test_axis_label_keeps_small_prices_readable():
    assert axis_label(0.0003) == "0.00030000"
    assert axis_label(0.25) == "0.2500"
    assert axis_label(12.5) == "12.50"
    assert axis_label(65432.1) == "65.43K"
