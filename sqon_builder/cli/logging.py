from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    handlers: list[logging.Handler]


def _level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int) -> LoggingState:
    """Route `sqon_builder` log records to stderr; returns the state to restore."""
    logger = logging.getLogger("sqon_builder")
    previous = LoggingState(level=logger.level, handlers=list(logger.handlers))

    handler = RichHandler(
        console=Console(file=sys.stderr, force_terminal=False),
        show_time=False,
        show_path=verbosity >= 2,
        rich_tracebacks=True,
    )
    logger.handlers = [handler]
    logger.setLevel(_level_for_verbosity(verbosity))
    return previous


def restore_logging(state: LoggingState) -> None:
    logger = logging.getLogger("sqon_builder")
    for handler in logger.handlers:
        if handler not in state.handlers:
            handler.close()
    logger.handlers = list(state.handlers)
    logger.setLevel(state.level)
