"""Local Claude Code productivity reports."""

__version__ = "0.1.0"
