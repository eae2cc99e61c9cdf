"""Simple logging configuration for coinwagon."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

# Define TRACE level (lower than DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

ROOT_LOGGER_NAME = "coinwagon"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter using ANSI escape codes."""

    # ANSI color codes
    COLORS = {
        "TRACE": "\033[90m",  # Dark gray
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[levelname]}{self.BOLD}{levelname}{self.RESET}"
            )

        result = super().format(record)

        record.levelname = levelname

        return result


def _build_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the application.

    Logs go to stderr so command output on stdout stays machine-readable.

    When the level is DEBUG, urllib3 is set to WARNING to reduce noise.
    Use TRACE to see all urllib3 connection logs.
    """
    log_level = log_level.upper()
    level = TRACE if log_level == "TRACE" else getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        level=level,
        handlers=[_build_handler()],
        force=True,
    )

    if log_level == "DEBUG":
        logging.getLogger("urllib3").setLevel(logging.WARNING)
    elif log_level == "TRACE":
        logging.getLogger("urllib3").setLevel(TRACE)


@contextmanager
def verbose_logging(enabled: bool = True) -> Iterator[None]:
    """Temporarily emit DEBUG diagnostics from the coinwagon logger.

    Used by the library entry point for ``--verbose``. When the host has
    already configured a handler that shows DEBUG records this is a no-op
    apart from the level change.
    """
    if not enabled:
        yield
        return

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    previous_level = logger.level
    added_handler: logging.Handler | None = None
    if not logger.handlers and not logging.getLogger().handlers:
        added_handler = _build_handler()
        logger.addHandler(added_handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield
    finally:
        logger.setLevel(previous_level)
        if added_handler is not None:
            logger.removeHandler(added_handler)
