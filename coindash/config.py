import configparser
import os
import re
from dataclasses import dataclass
from typing import Optional

from coindash.constants import (
    CONFIG_PATH, LOG_PATH, COINGECKO_API_BASE,
    DEFAULT_REFRESH, DEFAULT_TICK_MS, DEFAULT_TIMEOUT,
    DEFAULT_CURRENCY, DEFAULT_PER_PAGE, MAX_PER_PAGE,
    FETCH_MODES, DEFAULT_FETCH_MODE,
)


def parse_interval(value: str, default: int) -> int:
    """Convert interval string like '10s', '1m', '5m', '1h', '1d' to seconds."""
    value = value.strip().lower()
    m = re.match(r"^(\d+)\s*(s|m|h|d)$", value)
    if not m:
        print(f"[warning] Invalid interval '{value}', using {default}s")
        return default
    num, unit = int(m.group(1)), m.group(2)
    multipliers = {"s": 1, "m": 60, "h": 3600, "d": 86400}
    seconds = num * multipliers[unit]
    if seconds <= 0:
        print(f"[warning] Interval '{value}' must be positive, using {default}s")
        return default
    return seconds


def _parse_int(value: str, default: int, low: int, high: int, name: str) -> int:
    try:
        num = int(value.strip())
    except ValueError:
        print(f"[warning] Invalid {name} '{value}', using {default}")
        return default
    if num < low or num > high:
        clamped = max(low, min(num, high))
        print(f"[warning] {name} {num} out of range, using {clamped}")
        return clamped
    return num


@dataclass
class Config:
    refresh_interval: int = DEFAULT_REFRESH
    tick_rate_ms: int = DEFAULT_TICK_MS
    request_timeout: int = DEFAULT_TIMEOUT
    vs_currency: str = DEFAULT_CURRENCY
    per_page: int = DEFAULT_PER_PAGE
    fetch_mode: str = DEFAULT_FETCH_MODE
    api_base: str = COINGECKO_API_BASE
    log_level: str = "INFO"
    log_file: Optional[str] = LOG_PATH

    @property
    def tick_rate(self) -> float:
        return self.tick_rate_ms / 1000.0


def config_path() -> str:
    return os.environ.get("COINDASH_CONFIG") or CONFIG_PATH


def parse_config(path: str = "") -> Config:
    """Read config.ini and return a Config object."""
    path = path or config_path()
    cfg_obj = Config()
    if not os.path.exists(path):
        print("[notice] config.ini not found, using defaults")
        return cfg_obj

    cfg = configparser.RawConfigParser()
    cfg.read(path)
    sect = cfg["dashboard"] if "dashboard" in cfg else {}
    cfg_obj.refresh_interval = parse_interval(sect.get("refresh_interval", "60s"), DEFAULT_REFRESH)
    cfg_obj.request_timeout = parse_interval(sect.get("request_timeout", "30s"), DEFAULT_TIMEOUT)

    if "tick_rate_ms" in sect:
        cfg_obj.tick_rate_ms = _parse_int(sect["tick_rate_ms"], DEFAULT_TICK_MS, 10, 5000, "tick_rate_ms")
    if "per_page" in sect:
        cfg_obj.per_page = _parse_int(sect["per_page"], DEFAULT_PER_PAGE, 1, MAX_PER_PAGE, "per_page")
    if sect.get("vs_currency", "").strip():
        cfg_obj.vs_currency = sect["vs_currency"].strip().lower()
    if sect.get("api_base", "").strip():
        cfg_obj.api_base = sect["api_base"].strip().rstrip("/")

    mode = sect.get("fetch_mode", DEFAULT_FETCH_MODE).strip().lower()
    if mode in FETCH_MODES:
        cfg_obj.fetch_mode = mode
    else:
        print(f"[warning] Invalid fetch_mode '{mode}', using {DEFAULT_FETCH_MODE}")

    log_sect = cfg["logging"] if "logging" in cfg else {}
    cfg_obj.log_level = log_sect.get("level", "INFO").strip().upper() or "INFO"
    log_file = log_sect.get("file", "").strip()
    if log_file.lower() in ("none", "off"):
        cfg_obj.log_file = None
    elif log_file:
        cfg_obj.log_file = log_file

    return cfg_obj
