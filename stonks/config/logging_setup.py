"""Diagnostic logging setup shared by the CLI and API entrypoints."""

import logging
import sys


_LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"


def config_configure_logging(level: str = "WARNING") -> logging.Logger:
    """Route package diagnostics to stderr so stdout stays reserved for command output.

    Args:
        level: Logging level name.

    Returns:
        logging.Logger: Configured package logger.

    Raises:
        ValueError: Raised when the level name is unknown.
    """

    numeric_level = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"unsupported log level={level}")

    logger = logging.getLogger("stonks")
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.setLevel(numeric_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
