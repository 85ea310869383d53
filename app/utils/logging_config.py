import logging
import sys
import os
from datetime import datetime
from typing import Dict, Iterable, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

RESET = "\x1b[0m"

# LOG_LEVEL may be DEBUG, and uvicorn logs startup failures at CRITICAL
LEVEL_COLORS = {
    logging.DEBUG: "\x1b[36m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[31;1m",
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps each record in its level's colour."""

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)
        self._by_level: Dict[int, logging.Formatter] = {
            level: logging.Formatter(color + LOG_FORMAT + RESET, datefmt=DATE_FORMAT)
            for level, color in LEVEL_COLORS.items()
        }

    def format(self, record: logging.LogRecord) -> str:
        # custom levels fall back to the plain layout
        formatter = self._by_level.get(record.levelno)
        if formatter is None:
            return super().format(record)
        return formatter.format(record)


def setup_logging(level=logging.INFO, log_dir: Optional[str] = None):
    """
    Route the service's and uvicorn's loggers to the root logger.

    Console output goes to stderr in colour. With `log_dir`, records are also
    appended to `bug_relay_<YYYYMMDD>.log` there, uncoloured. Calling it again
    replaces the previous handlers.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter())
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"bug_relay_{datetime.now().strftime('%Y%m%d')}.log")
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for logger_name in ["app", "main", "uvicorn", "uvicorn.error", "uvicorn.access"]:
        named = logging.getLogger(logger_name)
        named.setLevel(level)
        named.propagate = True

    root_logger.info("logging_ready level=%s file=%s", logging.getLevelName(level), bool(log_dir))


def redact(text: str, secrets: Iterable[Optional[str]]) -> str:
    """Replace every occurrence of each non-empty secret in text with '***'."""
    if not text:
        return text
    for secret in secrets:
        if secret:
            text = text.replace(secret, "***")
    return text
