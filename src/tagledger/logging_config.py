"""Logging setup for the tagledger CLI.

Library modules only create module loggers; the CLI calls setup_logging()
once at startup.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ["httpx", "httpcore", "sqlalchemy.engine"]


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Configure the root logger with a single stderr handler.

    Args:
        level: Log level; if None, reads TAGLEDGER_LOG_LEVEL, defaulting to WARNING

    Returns:
        The configured root logger
    """
    if level is None:
        level = os.environ.get("TAGLEDGER_LOG_LEVEL", "WARNING")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Drop handlers from a previous call
    for handler in list(root_logger.handlers):
        if getattr(handler, "_tagledger", False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler._tagledger = True
    root_logger.addHandler(handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    return root_logger
