"""CLI utilities for finding and checking the claude executable."""

import os
import shutil
import subprocess
from typing import Optional

from .logging import get_logger


def _common_paths() -> list[str]:
    return [
        os.path.expanduser("~/.claude/local/claude"),
        os.path.expanduser("~/.claude/claude"),
        "/usr/local/bin/claude",
        "/opt/homebrew/bin/claude",
    ]


def find_claude() -> Optional[str]:
    """Find the claude executable.

    Checks the following locations in order:
    1. PATH via shutil.which("claude")
    2. ~/.claude/local/claude
    3. ~/.claude/claude
    4. /usr/local/bin/claude
    5. /opt/homebrew/bin/claude

    Returns:
        Path to claude or None if not found.
    """
    path = shutil.which("claude")
    if path:
        return path

    # Installer locations that might not be in PATH
    for candidate in _common_paths():
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate

    return None


def get_claude_version(path: str) -> Optional[str]:
    """Ask the executable for its version; None if it can't tell us."""
    try:
        completed = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError) as e:
        get_logger().debug(f"Could not get Claude version: {e}")
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.strip() or None


def check_claude_installed() -> tuple[bool, Optional[str], Optional[str]]:
    """Check for claude and read its version.

    Returns:
        Tuple of (installed, path, version).
    """
    path = find_claude()
    if not path:
        get_logger().debug("Claude not found in PATH or common install locations")
        return False, None, None
    return True, path, get_claude_version(path)


def check_claude_available() -> tuple[bool, str]:
    """Check if claude CLI is available.

    Returns:
        Tuple of (is_available, message).
    """
    path = find_claude()
    if path:
        return True, f"claude found at: {path}"
    else:
        return False, (
            "claude CLI not found in PATH. "
            "Please install Claude Code: "
            "https://claude.ai/code"
        )
