"""
Logging for apicompat.

Everything is logged under the ``apicompat`` logger and written to stderr
through a rich handler, so stdout carries nothing but the difference report
(``--json`` output stays parseable).  The root logger is left alone, which
keeps an embedding build tool's own logging intact.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "apicompat"

# ComparerSettings.verbosity -> level
LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(
    verbosity: str = "normal", log_file: Optional[str] = None
) -> logging.Logger:
    """
    (Re)configure the ``apicompat`` logger.

    Safe to call more than once: handlers from an earlier call are replaced,
    so the CLI can set up early from its flags and again once the merged
    settings are known.

    Args:
        verbosity: ``"quiet"``, ``"normal"`` or ``"verbose"``
        log_file: Optional file that receives the same records

    Returns:
        The ``apicompat`` logger
    """
    if verbosity not in LEVELS:
        raise ValueError(f"unknown verbosity: {verbosity!r}")
    level = LEVELS[verbosity]
    debug = level == logging.DEBUG

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=debug,
            markup=False,
            show_time=debug,
            show_path=debug,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for one apicompat module.

    Args:
        name: Module name such as ``apicompat.engine.matcher``; names outside
            the package are nested under it.  None gives the package logger.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
