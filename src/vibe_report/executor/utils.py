"""Utility functions for executor module."""

import re
from datetime import datetime

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|\x1b[^[[]?")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text.

    This removes color codes, cursor movement, and other terminal control sequences.

    Args:
        text: Text potentially containing ANSI escape codes.

    Returns:
        Clean text without ANSI codes.
    """
    return _ANSI_PATTERN.sub("", text)


def format_timestamp(moment: datetime) -> str:
    """Format a wall-clock time as ``[HH:MM:SS]``."""
    return moment.strftime("[%H:%M:%S]")


def format_elapsed(start: datetime, end: datetime) -> str:
    """Whole seconds between two times, as ``+Ns``."""
    elapsed = int((end - start).total_seconds())
    return f"+{elapsed}s"


def format_duration(ms: float) -> str:
    """Format milliseconds as ``Xm Ys`` or ``Ys``."""
    seconds = int(ms // 1000)
    minutes, remaining = divmod(seconds, 60)
    if minutes > 0:
        return f"{minutes}m {remaining}s"
    return f"{seconds}s"


def format_size_kb(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.2f} KB"


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    return text[:limit] + "..." if len(text) > limit else text
