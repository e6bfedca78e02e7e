"""Logging utilities for executor."""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

# Global logger instance (singleton)
_logger: Optional[logging.Logger] = None

_TRUTHY = ("1", "true", "yes", "on")


def get_logger() -> logging.Logger:
    """Get or create the vibe-report logger."""
    global _logger
    if _logger is None:
        _logger = _setup_logger()
    return _logger


def _resolve_level() -> int:
    if os.environ.get("VIBELOG_DEBUG") or os.environ.get("DEBUG"):
        return logging.DEBUG
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    if level_name in ("DEBUG", "INFO", "WARNING", "ERROR"):
        return getattr(logging, level_name)
    return logging.INFO


def _setup_logger() -> logging.Logger:
    """Setup logging.

    The terminal is reserved for the report narrative, so nothing is logged
    to the console. Set VIBE_LOG_OUTPUT to enable file logging:
    - Set to a file path to log to that specific file.
    - Set to "1", "true", "yes", or "on" to log to ~/.vibe-log/logs/.
    """
    logger = logging.getLogger("vibe_report")
    logger.setLevel(_resolve_level())

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    log_env = os.environ.get("VIBE_LOG_OUTPUT")

    if not log_env:
        logger.addHandler(logging.NullHandler())
        return logger

    log_path: Path
    if log_env.lower() in _TRUTHY:
        logs_dir = Path.home() / ".vibe-log" / "logs"
        log_path = logs_dir / f"vibe-report_{datetime.now().strftime('%Y-%m-%d')}.log"
    else:
        log_path = Path(log_env)

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)
    except OSError as e:
        # Fallback to stderr if file logging fails
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(f"Failed to setup log file: {e} | %(message)s"))
        logger.addHandler(stream_handler)

    return logger
