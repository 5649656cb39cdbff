"""Logging helpers for schemaview."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

__all__ = ["get_logger", "setup_logging"]

_ROOT = "schemaview"


def setup_logging(level: int = logging.INFO, stream: TextIO = sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level.
        stream: Output stream.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the schemaview namespace.

    Args:
        name: Dotted module name; names outside the package are nested under it.

    Returns:
        Logger instance.
    """
    if not name:
        return logging.getLogger(_ROOT)
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")
