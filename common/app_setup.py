"""
Reusable logging and print setup for all parts of the project.

Functions:
    setup_logging      - Configure and return a logger.
    set_print_logger   - Set the logger for print_error.
    print_error        - Print and log an error message.
"""

import logging
import os
import sys
from typing import Optional

from rich import print as rich_print
from rich.markup import escape

LOGFILE_ENV = "PATTERNKIT_LOGFILE"

# Module-level variable to hold the logger for print_error
_print_logger: Optional[logging.Logger] = None


def setup_logging(app_name: str = "patternkit", loglevel: int = logging.INFO, logfile: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the application.
    Logs go to ``logfile``, else to $PATTERNKIT_LOGFILE, else to ~/.<app_name>/log.txt.
    Existing handlers of the root logger are replaced.
    Returns the configured logger.
    """
    logger = logging.getLogger()
    logger.setLevel(loglevel)
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(process)d %(name)s %(message)s')
    if logfile is None:
        logfile = os.environ.get(LOGFILE_ENV)
    if logfile is None:
        log_dir = os.path.expanduser(f"~/.{app_name}")
        os.makedirs(log_dir, exist_ok=True)
        logfile = os.path.join(log_dir, "log.txt")
    handler = logging.FileHandler(logfile)

    # Remove any existing handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    set_print_logger(logger)
    logger.debug(f"Logging initialized for {app_name} in {logfile}")
    return logger


def set_print_logger(logger: logging.Logger):
    """
    Set the logger to be used by print_error.
    """
    global _print_logger
    _print_logger = logger


def print_error(message: str, **kwargs):
    """
    Print and log an error message (stderr and error level), using the logger set by set_print_logger.
    """
    rich_print(f'[bold red]{escape(message)}[/bold red]', file=sys.stderr, **kwargs)
    if _print_logger is not None:
        _print_logger.error(message)
