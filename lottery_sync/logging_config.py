"""Logging configuration."""

from __future__ import annotations

import logging


def configure_logging(level_name: str = "INFO") -> None:
    """Configure plain console logs for a single job run."""

    level = getattr(logging, str(level_name).upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Reduce noisy loggers
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
