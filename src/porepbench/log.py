"""
Logging setup for the benchmark entry points.

Modules log through ``logging.getLogger(__name__)``; only the CLI calls
:func:`init_timed` to attach a timestamped handler.
"""

import logging
import os
import sys
from typing import Optional, Union

from .errors import ConfigError

LOG_ENV = "POREPBENCH_LOG"
LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s > %(message)s"


def init_timed(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Attach a timestamped stderr handler to the ``porepbench`` logger.

    Args:
        level: Explicit level. Falls back to $POREPBENCH_LOG, then INFO.

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("porepbench")

    if level is None:
        level = os.environ.get(LOG_ENV, "info")
    if isinstance(level, str):
        level = level.upper()

    try:
        logger.setLevel(level)
    except ValueError as e:
        raise ConfigError(f"invalid log level: {level}") from e

    # Calling twice (tests, repeated main()) must not duplicate output.
    for handler in logger.handlers:
        if getattr(handler, "_porepbench_handler", False):
            return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._porepbench_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
