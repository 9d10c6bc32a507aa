"""
Logging configuration for the TaskHero CLI.

Library modules only create loggers (``logging.getLogger(__name__)``);
handlers are installed here, once, by the command-line entry point.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ThirdPartyFilter(logging.Filter):
    """Keep taskhero logs; let other libraries through only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskhero"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """
    Configure root logging with a single stderr handler.

    Args:
        level: Level name for taskhero loggers
        debug: Force DEBUG and stop filtering third-party records (httpx, etc.)
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO))

    # Remove any pre-existing handlers to avoid duplicates.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    if not debug:
        handler.addFilter(_ThirdPartyFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
