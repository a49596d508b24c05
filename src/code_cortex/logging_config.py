"""
Logging configuration for Code Cortex.

Only the ``code_cortex`` logger is configured. Records go to a rich handler
on stderr so stdout stays clean for reports (notably ``--json``), and
optionally to a plain-text log file.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "code_cortex"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def log_level(verbose: bool = False, quiet: bool = False) -> int:
    """``quiet`` wins over ``verbose``."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route package logging to stderr and, when given, to ``log_file``.

    Calling it again replaces the handlers installed by the previous call,
    so repeated CLI invocations in one process do not duplicate output.

    Returns:
        The ``code_cortex`` logger
    """
    level = log_level(verbose, quiet)
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    )

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name`` under the ``code_cortex`` namespace."""
    if name is None:
        return logging.getLogger(PACKAGE_LOGGER)
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
