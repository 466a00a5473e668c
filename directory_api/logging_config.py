"""
Logging configuration for the directory resolution API.

Console output only: the service runs behind uvicorn and its logs are
collected from stderr.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

#libraries that are chatty at INFO
QUIET_LOGGERS = ("asyncio", "httpx", "uvicorn.access")


class LogColours:
    RESET = "\033[0m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    GRAY = "\033[90m"


class ColouredFormatter(logging.Formatter):
    """Formatter that tints the level name by severity."""

    COLOURS = {
        logging.DEBUG: LogColours.GRAY,
        logging.INFO: LogColours.BLUE,
        logging.WARNING: LogColours.YELLOW,
        logging.ERROR: LogColours.RED,
        logging.CRITICAL: LogColours.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        colour = self.COLOURS.get(record.levelno)
        if colour is None:
            return super().format(record)

        #records are shared between handlers, put the plain name back afterwards
        levelname = record.levelname
        record.levelname = f"{colour}{levelname}{LogColours.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(level: str = "INFO", use_colours: bool = True) -> None:
    """
    Configure the root logger with a single stderr handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_colours: Tint level names; turn off when stderr is captured to a file

    Example:
        >>> setup_logging("DEBUG")  # every resolution strategy is logged
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    formatter_cls = ColouredFormatter if use_colours else logging.Formatter
    handler.setFormatter(formatter_cls(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    #force replaces whatever uvicorn installed first
    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Resolving identifier")
    """
    return logging.getLogger(name)


def init_logging(debug: bool = False, use_colours: bool = True) -> None:
    setup_logging(level="DEBUG" if debug else "INFO", use_colours=use_colours)
