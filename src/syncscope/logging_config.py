"""
Logging configuration for SyncScope.

Everything logs under the ``syncscope`` namespace to stderr through a rich
handler, so report output on stdout stays machine-readable. The scan's
one-line summary is logged at INFO by ``syncscope.profiler``; it can be shown
on its own without switching the whole package to verbose output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "syncscope"
SUMMARY_LOGGER = f"{ROOT_LOGGER}.profiler"


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    show_summary: bool = False,
) -> logging.Logger:
    """
    Configure logging for one command run.

    Safe to call repeatedly in one process: handlers from an earlier call
    are replaced.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging; wins over show_summary
        log_file: Optional file path to append logs to
        show_summary: Show the scan summary line at the default level

    Returns:
        The ``syncscope`` logger
    """
    level = _resolve_level(verbose, quiet)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # object and script names are user data, not rich markup
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    summary_level = logging.INFO if show_summary and not quiet and not verbose else logging.NOTSET
    logging.getLogger(SUMMARY_LOGGER).setLevel(summary_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, placed under the ``syncscope`` namespace."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
