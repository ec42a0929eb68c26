#!/usr/bin/env python3
"""Console logging for the trello-aid-export command."""

import logging
import sys
from typing import Optional, TextIO

CLI_FORMAT = "%(levelname)s: %(message)s"

# Loggers that are too chatty at DEBUG while talking to Trello
NOISY_LOGGERS = ("urllib3", "requests")

_console_handler: Optional[logging.Handler] = None


def setup_cli_logging(
    verbose: bool = False, stream: Optional[TextIO] = None
) -> logging.Handler:
    """Send log records to the console, one ``LEVEL: message`` line each.

    Rate limit progress and the export summary go to stdout alongside the
    rest of the command's output. Calling this again only adjusts the level
    of the handler installed the first time.

    Args:
        verbose: If True, show DEBUG messages such as per-card progress
        stream: Stream to write to (default: stdout)

    Returns:
        The console handler attached to the root logger

    """
    global _console_handler

    level = logging.DEBUG if verbose else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if _console_handler is None or _console_handler not in root_logger.handlers:
        _console_handler = logging.StreamHandler(stream or sys.stdout)
        _console_handler.setFormatter(logging.Formatter(CLI_FORMAT))
        root_logger.addHandler(_console_handler)

    _console_handler.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    return _console_handler
