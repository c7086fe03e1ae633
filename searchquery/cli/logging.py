"""Logging setup for the CLI.

Library modules only create `logging.getLogger(__name__)` loggers; handlers
are installed here for the duration of one CLI invocation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "searchquery"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    propagate: bool
    added: list[logging.Handler]


def _stderr_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    verbosity: int,
    log_file: Path | None,
    enable_file: bool,
) -> LoggingState:
    """Attach stderr (and optionally file) handlers to the package logger.

    Returns the previous state for restore_logging().
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level = logger.level
    previous_propagate = logger.propagate

    stderr_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=verbosity >= 2,
    )
    stderr_handler.setLevel(_stderr_level(verbosity))
    added: list[logging.Handler] = [stderr_handler]
    logger.addHandler(stderr_handler)
    logger.setLevel(stderr_handler.level)
    logger.propagate = False

    if enable_file and log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            logger.warning(f"File logging disabled, cannot open {log_file}: {exc}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)
            added.append(file_handler)
            logger.setLevel(logging.DEBUG)

    return LoggingState(level=previous_level, propagate=previous_propagate, added=added)


def restore_logging(state: LoggingState) -> None:
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in state.added:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(state.level)
    logger.propagate = state.propagate
