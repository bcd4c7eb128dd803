"""
Console logging configuration for the sd-jwt-codec command.

The library modules only create loggers; handlers are installed here, and
only by the CLI.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(verbose: bool = False, level: str = "WARNING") -> None:
    """Configure a single stderr handler on the root logger.

    - Console level is *level* (WARNING by default), so dropped disclosures
      and digest failures are always visible.
    - When *verbose* is True, the level drops to DEBUG and records carry a
      timestamp and logger name.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else level)

    # Remove any pre-existing handlers (e.g. from basicConfig)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_fmt = logging.Formatter(
        "%(levelname)-8s  %(message)s" if not verbose
        else "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(console_fmt)
    root_logger.addHandler(console_handler)
