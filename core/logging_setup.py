"""
Logging configuration for PlayerSync sessions.

Usage:
    from core.logging_setup import configure_logging

    log_file = configure_logging(level="DEBUG", log_dir="logs", name="leader.mp4")

The LOG_LEVEL environment variable overrides the default level when no level
is passed explicitly.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(name)s | %(levelname)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def get_log_file_path(log_dir: str, name: Optional[str] = None) -> Path:
    """
    Build a timestamped log file path, e.g. logs/sync-142503-leader.mp4.log
    """
    timestamp = datetime.now().strftime("%H%M%S")
    stem = f"sync-{timestamp}-{name}" if name else f"sync-{timestamp}"
    return Path(log_dir) / f"{stem}.log"


def configure_logging(
    level: Optional[str] = None,
    log_dir: Optional[str] = None,
    name: Optional[str] = None
) -> Optional[Path]:
    """
    Configure the root logger for console output and an optional log file.

    Args:
        level: Log level name; falls back to LOG_LEVEL, then INFO
        log_dir: Directory for a timestamped log file (None = console only)
        name: Name appended to the log file (e.g. the media file name)

    Returns:
        Path of the log file, or None when logging to console only

    Raises:
        ValueError: If the level name is not a known logging level
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {level}")

    handlers = [logging.StreamHandler()]
    log_file = None
    if log_dir:
        log_file = get_log_file_path(log_dir, name)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,  # Override any existing config
    )

    if log_file:
        logging.getLogger(__name__).info(f"Logging output to '{log_file}'")

    return log_file
