"""Logging setup, shared by every module through ``from sharelink.logger import logger``."""

import sys
from pathlib import Path

from loguru import logger

from sharelink.config import ENV, LOG_DIR

logger.remove()

logger.add(
    sys.stderr,
    level="DEBUG" if ENV == "development" else "INFO",
    colorize=True,
    backtrace=True,
    diagnose=ENV == "development",
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level: <8}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
)

if LOG_DIR:
    log_dir = Path(LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / "sharelink.log",
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        encoding="utf-8",
        enqueue=True,
    )

    # Warnings and above as JSON, for offline reconciliation of orphaned blobs
    logger.add(
        log_dir / "sharelink.json",
        level="WARNING",
        rotation="1 day",
        retention="30 days",
        serialize=True,
        encoding="utf-8",
        enqueue=True,
    )

__all__ = ["logger"]
