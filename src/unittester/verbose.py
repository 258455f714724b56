"""Debug logging configuration for test runs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def setup_logger(
    debug_file: Path | None = None,
    verbose: bool = False,
    logger_name: str = "unittester",
) -> logging.Logger:
    """
    Configure and return a logger for debug output of a test run.

    Writes to debug_file when one is given, and to stderr if verbose=True.
    With neither, the logger is left without handlers and records nothing
    beyond what propagates to the root logger.

    Args:
        debug_file: Path to a debug log file, created along with its parents.
        verbose: If True, also log to stderr.
        logger_name: Name of the logger instance. Session loggers live under
            "unittester", so configuring that name captures all of them.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(logger_name)

    # Reconfiguring replaces the handlers of an earlier run
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    logger.disabled = False
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"
    )

    if debug_file is not None:
        debug_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(debug_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if verbose:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG)
        stderr_handler.setFormatter(formatter)
        logger.addHandler(stderr_handler)

    return logger
