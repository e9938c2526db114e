"""Logging setup — stdlib logging routed through Rich.

Usage::

    from bigdiff.log import get_logger

    logger = get_logger(__name__)
    logger.warning("Skipping %s", path)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Log output goes to stderr so JSON reports on stdout stay parseable.
console = Console(stderr=True)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger. Handlers live on the root (see setup_logging)."""
    return logging.getLogger(name)


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """Configure the root logger once, at the CLI entry point.

    ``LOG_LEVEL`` in the environment overrides *level*.
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(rich_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)
