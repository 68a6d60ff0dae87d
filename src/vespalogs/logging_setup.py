"""Idempotent stderr logging setup."""

from __future__ import annotations

import logging
import sys

_CONFIGURED = False


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure vespalogs logging to stderr. Safe to call multiple times.

    Later calls only adjust the level.
    """
    global _CONFIGURED  # noqa: PLW0603
    logger = logging.getLogger("vespalogs")
    logger.setLevel(level)
    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )

    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True
