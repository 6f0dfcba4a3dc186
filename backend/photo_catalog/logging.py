# backend/photo_catalog/logging.py
"""Logging initialization using loguru."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


def init_logging(level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace the default sink; optionally add a rotating file sink under log_dir."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), backtrace=False, diagnose=False)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path / "catalog_{time:YYYYMMDD}.log"),
            rotation="10 MB",
            retention="10 days",
            compression="zip",
            enqueue=True,
            backtrace=False,
            diagnose=False,
            level=level.upper(),
        )
