import logging
from typing import Optional

DEFAULT_PLAIN_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _normalize_level(level: Optional[str]) -> int:
    raw = (level or "INFO").upper()
    val = getattr(logging, raw, None)
    return val if isinstance(val, int) else logging.INFO


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Initialise logging for the dashboard.

    The terminal is owned by the live display, so records only go to
    ``log_file``; with no file they are discarded.
    """
    handlers: list = []
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(DEFAULT_PLAIN_FORMAT))
        handlers.append(file_handler)
    else:
        handlers.append(logging.NullHandler())

    logging.basicConfig(level=_normalize_level(level), handlers=handlers, force=True)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
