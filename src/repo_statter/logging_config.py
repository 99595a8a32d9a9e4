"""
Logging for repo-statter.

Handlers hang off the ``repo_statter`` logger only, never the root logger, so
embedding analyze_repository() in another application leaves that
application's logging alone. The CLI calls setup_logging() once per command;
library modules only ever call get_logger().
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "repo_statter"

# Marks handlers installed here so a repeated setup replaces them
_HANDLER_FLAG = "_repo_statter_handler"

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route repo-statter diagnostics to stderr through rich.

    Cache hits, misses and git timing are logged at INFO/DEBUG, so the
    default WARNING level keeps report output clean. Handlers from an
    earlier call are removed first.

    Args:
        verbose: DEBUG level, with source paths and traceback locals
        quiet: ERROR level only (used for --json so stderr stays empty)
        log_file: Also append plain-text records to this file

    Returns:
        The repo_statter logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()

    # Repository paths can contain [brackets]; keep rich markup off
    rich_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=True,
        show_path=verbose,
        log_time_format="[%X]",
    )
    handlers: list[logging.Handler] = [rich_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``repo_statter`` namespace.

    ``get_logger(__name__)`` inside the package returns the module's own
    logger; any other name is prefixed, e.g. ``"git"`` -> ``repo_statter.git``.
    """
    if name is None:
        return logging.getLogger(_ROOT_LOGGER)

    if name != _ROOT_LOGGER and not name.startswith(_ROOT_LOGGER + "."):
        name = f"{_ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
