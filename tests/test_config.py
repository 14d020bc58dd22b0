import pytest

from coindash.config import Config, parse_config, parse_interval


@pytest.mark.parametrize("raw,expected", [
    ("10s", 10), ("1m", 60), ("5m", 300), ("1h", 3600), ("1d", 86400), (" 90 S ", 90),
])
def test_parse_interval(raw, expected):
    assert parse_interval(raw, 60) == expected


@pytest.mark.parametrize("raw", ["abc", "10", "-5s", "0s", ""])
def test_parse_interval_invalid_uses_default(raw, capsys):
    assert parse_interval(raw, 60) == 60
    assert "[warning]" in capsys.readouterr().out


def test_missing_file_gives_defaults(tmp_path, capsys):
    cfg = parse_config(str(tmp_path / "nope.ini"))
    assert cfg == Config()
    assert "config.ini not found" in capsys.readouterr().out


def test_full_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(
        "[dashboard]\n"
        "refresh_interval = 2m\n"
        "request_timeout = 10s\n"
        "tick_rate_ms = 100\n"
        "vs_currency = EUR\n"
        "per_page = 50\n"
        "fetch_mode = blocking\n"
        "api_base = http://localhost:8000/api/v3/\n"
        "[logging]\n"
        "level = debug\n"
        "file = none\n"
    )
    cfg = parse_config(str(path))
    assert cfg.refresh_interval == 120
    assert cfg.request_timeout == 10
    assert cfg.tick_rate_ms == 100
    assert cfg.tick_rate == 0.1
    assert cfg.vs_currency == "eur"
    assert cfg.per_page == 50
    assert cfg.fetch_mode == "blocking"
    assert cfg.api_base == "http://localhost:8000/api/v3"
    assert cfg.log_level == "DEBUG"
    assert cfg.log_file is None


def test_invalid_values_fall_back(tmp_path, capsys):
    path = tmp_path / "config.ini"
    path.write_text(
        "[dashboard]\n"
        "per_page = 1000\n"
        "tick_rate_ms = fast\n"
        "fetch_mode = async\n"
    )
    cfg = parse_config(str(path))
    assert cfg.per_page == 250
    assert cfg.tick_rate_ms == 200
    assert cfg.fetch_mode == "background"
    out = capsys.readouterr().out
    assert out.count("[warning]") == 3


def test_env_var_selects_config(tmp_path, monkeypatch):
    path = tmp_path / "other.ini"
    path.write_text("[dashboard]\nvs_currency = btc\n")
    monkeypatch.setenv("COINDASH_CONFIG", str(path))
    assert parse_config().vs_currency == "btc"
