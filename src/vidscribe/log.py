"""
Logging setup: timestamped, level-tagged lines on the console and in an optional log file.
"""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "vidscribe"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}
_RESET = "\033[0m"

logger = logging.getLogger(LOGGER_NAME)


class ColorFormatter(logging.Formatter):
    """Wrap each formatted line in the ANSI color of its level."""

    def __init__(self, use_color: bool = True):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not self.use_color:
            return line
        color = _COLORS.get(record.levelno)
        return f"{color}{line}{_RESET}" if color else line


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def _is_tty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def setup_logging(verbose: bool = False, log_file: str | None = None, *, stdout=None, stderr=None) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    out = stdout or sys.stdout
    err = stderr or sys.stderr

    close_log_files()
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    console = logging.StreamHandler(out)
    console.addFilter(_BelowError())
    console.setFormatter(ColorFormatter(use_color=_is_tty(out)))
    logger.addHandler(console)

    errors = logging.StreamHandler(err)
    errors.setLevel(logging.ERROR)
    errors.setFormatter(ColorFormatter(use_color=_is_tty(err)))
    logger.addHandler(errors)

    if log_file:
        add_log_file(log_file)
    return logger


def add_log_file(path: str) -> None:
    """Append every record to `path` as well (uncolored)."""
    target = Path(path).expanduser().resolve()
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == target:
            return
    target.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(target, mode="a", encoding="utf-8")
    fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(fh)


def close_log_files() -> None:
    for h in list(logger.handlers):
        if isinstance(h, logging.FileHandler):
            logger.removeHandler(h)
            h.close()
