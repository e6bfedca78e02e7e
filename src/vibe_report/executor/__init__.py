"""Executor package for driving the claude CLI and capturing its report."""

from .cli import check_claude_available, check_claude_installed, find_claude
from .errors import AbnormalExit, AgentRunError, ProcessTerminated, SpawnError
from .models import ExecutionStats, ProcessResult, StreamEvent
from .parser import EventParser
from .runner import execute_claude_prompt
from .transport import select_transport

__all__ = [
    "execute_claude_prompt",
    "check_claude_available",
    "check_claude_installed",
    "find_claude",
    "select_transport",
    "EventParser",
    "StreamEvent",
    "ExecutionStats",
    "ProcessResult",
    "AgentRunError",
    "SpawnError",
    "AbnormalExit",
    "ProcessTerminated",
]
