"""Logging helper module."""

import sys
from logging import (
    DEBUG,
    WARNING,
    Formatter,
    Logger,
    StreamHandler,
    getLogger,
)

PACKAGE_LOGGER = "sql_indent"

_handler: StreamHandler | None = None


def init_logging(verbose: bool = False) -> None:
    """Attach a stderr handler to the package logger.

    Safe to call more than once; the previously installed handler is replaced
    so it always writes to the current ``sys.stderr``.
    """
    global _handler

    package_logger = getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)

    _handler = StreamHandler(sys.stderr)
    _handler.setFormatter(Formatter("%(levelname)s: %(message)s"))
    package_logger.addHandler(_handler)
    package_logger.setLevel(DEBUG if verbose else WARNING)
    if verbose:
        package_logger.debug("Debug logging enabled.")


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)
