"""Logging configuration for assessment runs."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# Library modules log under their package names; the CLI wires these roots.
LOGGER_ROOTS = ("core", "collectors", "diagnostics", "shared")


def log_file_for(log_dir: Path, now: datetime | None = None) -> Path:
    """Timestamped log file path for one run, e.g. assessment-2024-05-01_093000.log."""
    now = now or datetime.now(timezone.utc)
    return log_dir / f"assessment-{now.strftime('%Y-%m-%d_%H%M%S')}.log"


def setup_logger(
    debug_file: Path,
    verbose: bool = False,
    logger_names: tuple[str, ...] = LOGGER_ROOTS,
) -> list[logging.Logger]:
    """
    Configure the package loggers for one run.

    Always writes DEBUG and above to debug_file. With verbose=True the same
    records also go to stderr.

    Returns:
        The configured logger instances.
    """
    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S"
    )

    debug_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(debug_file, mode='a')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    stderr_handler = None
    if verbose:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG)
        stderr_handler.setFormatter(formatter)

    loggers = []
    for name in logger_names:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.disabled = False
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.addHandler(file_handler)
        if stderr_handler is not None:
            logger.addHandler(stderr_handler)
        loggers.append(logger)

    return loggers
