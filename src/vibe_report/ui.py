"""Shared terminal console and colour theme."""

from typing import Optional

from rich.console import Console
from rich.theme import Theme

THEME = Theme({
    "primary": "bright_cyan",
    "accent": "bright_magenta",
    "muted": "grey62",
    "highlight": "bright_white",
    "success": "bright_green",
    "error": "bright_red",
    "warning": "yellow",
    "info": "bright_blue",
    "dim": "dim",
})

RULE = "━" * 60

_console: Optional[Console] = None


def get_console() -> Console:
    """Get or create the process-wide console."""
    global _console
    if _console is None:
        _console = Console(theme=THEME, highlight=False)
    return _console


def make_console(file, width: int = 120) -> Console:
    """Console bound to an arbitrary file, used for captured output."""
    return Console(
        file=file,
        theme=THEME,
        highlight=False,
        force_terminal=False,
        color_system=None,
        width=width,
    )
