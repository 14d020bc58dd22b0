import os

# Project root: parent of the coindash/ package directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.ini")
LOG_PATH = os.path.join(PROJECT_ROOT, "coindash.log")

APP_NAME = "coindash"
APP_VERSION = "0.1.0"
USER_AGENT = f"{APP_NAME}/{APP_VERSION}"

COINGECKO_API_BASE = "https://api.coingecko.com/api/v3"

DEFAULT_REFRESH = 60          # auto refresh interval, seconds
DEFAULT_TICK_MS = 200         # bounded wait for a key event
DEFAULT_TIMEOUT = 30          # provider-side request timeout, seconds
DEFAULT_CURRENCY = "usd"
DEFAULT_PER_PAGE = 100
MAX_PER_PAGE = 250            # CoinGecko page size limit

FETCH_MODES = ("background", "blocking")
DEFAULT_FETCH_MODE = "background"

# Horizons requested from /coins/markets, in display order
CHANGE_HORIZONS = ["1h", "24h", "7d", "14d", "30d", "60d", "200d", "1y"]

# The sparkline covers 7 days
SERIES_DAYS = 7
SERIES_HOURS = SERIES_DAYS * 24
ONE_HOUR_WIDEN = 4

# Screen chrome around the coin table (rows)
CHART_HEIGHT_DIVISOR = 5      # chart takes 1/5 of the terminal
FOOTER_ROWS = 3
TABLE_CHROME_ROWS = 3         # panel border top+bottom, header row

# Column definitions for the coin table
# Each column: (header_label, justify, min_width)
COIN_COLUMNS = [
    ("#", "right", 4),
    ("Coin", "left", 7),
    ("Price", "right", 12),
    ("1h %", "right", 9),
    ("24h %", "right", 9),
    ("7d %", "right", 9),
    ("Market Cap", "right", 10),
]

# Colour scheme
BORDER_STYLE = "steel_blue"
HEADER_STYLE = "bold sky_blue1"
POSITIVE_STYLE = "spring_green1"
NEGATIVE_STYLE = "indian_red1"
SELECTED_STYLE = "on grey19"
TEXT_STYLE = "grey82"
MUTED_STYLE = "grey50"
CHART_STYLE = "sky_blue1"
