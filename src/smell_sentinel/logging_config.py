"""
Logging configuration for smell-sentinel.

Log records go to stderr through rich so they never mix with the report
written to stdout. A run log file, when requested, always records at
least INFO so the file is useful even when the terminal is kept quiet.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "smell_sentinel"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the smell_sentinel logger for one run.

    Handlers from a previous call are closed and replaced, so repeated
    invocations in one process (tests, embedding) never write twice.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging on the terminal
        log_file: Optional file to append the run log to

    Returns:
        Configured logger instance for smell_sentinel
    """
    if quiet:
        console_level = logging.ERROR
    elif verbose:
        console_level = logging.DEBUG
    else:
        console_level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)

    level = console_level
    if log_file:
        file_level = logging.DEBUG if verbose else logging.INFO
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
        level = min(level, file_level)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'smell_sentinel.engine')
              If None, returns the root smell_sentinel logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
