"""Data models for executor module."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

# Result subtypes that carry execution statistics worth keeping.
QUALIFYING_RESULT_SUBTYPES = ("success", "error_max_turns", "error_during_execution")


@dataclass
class TextBlock:
    """Narrative text written by the agent."""
    text: str


@dataclass
class ToolUseBlock:
    """A tool invocation requested by the agent."""
    name: str
    input: dict = field(default_factory=dict)

    @property
    def subagent_type(self) -> Optional[str]:
        """Name of the delegated sub-agent when this is a ``Task`` call."""
        if self.name == "Task":
            return self.input.get("subagent_type") or None
        return None


@dataclass
class ToolResultBlock:
    """Outcome of a tool call, reported back inside a ``user`` event."""
    is_error: bool = False
    content: Any = None


@dataclass
class UnknownBlock:
    """A content block of a type this client does not know about."""
    block_type: str
    data: dict = field(default_factory=dict)


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock, UnknownBlock]


def parse_content_block(raw: Any) -> ContentBlock:
    """Convert one raw ``message.content`` entry into a typed block."""
    if not isinstance(raw, dict):
        return UnknownBlock(block_type=type(raw).__name__)

    block_type = raw.get("type", "unknown")
    if block_type == "text":
        return TextBlock(text=raw.get("text") or "")
    if block_type == "tool_use":
        tool_input = raw.get("input")
        return ToolUseBlock(
            name=raw.get("name") or "Unknown tool",
            input=tool_input if isinstance(tool_input, dict) else {},
        )
    if block_type == "tool_result":
        return ToolResultBlock(
            is_error=bool(raw.get("is_error", False)),
            content=raw.get("content"),
        )
    return UnknownBlock(block_type=block_type, data=raw)


@dataclass
class StreamEvent:
    """Event from the claude stream-json output."""
    event_type: str
    subtype: Optional[str] = None
    data: dict = field(default_factory=dict)

    @classmethod
    def from_json(cls, line: str) -> Optional["StreamEvent"]:
        """Parse a JSON line into a StreamEvent.

        Returns None for anything that is not a JSON object.
        """
        try:
            data = json.loads(line)
        except (ValueError, RecursionError):
            return None
        if not isinstance(data, dict):
            return None
        return cls(
            event_type=data.get("type", "unknown"),
            subtype=data.get("subtype"),
            data=data,
        )

    @property
    def content(self) -> list[ContentBlock]:
        """Typed ``message.content`` blocks, empty when absent."""
        message = self.data.get("message")
        if not isinstance(message, dict):
            return []
        raw_blocks = message.get("content")
        if not isinstance(raw_blocks, list):
            return []
        return [parse_content_block(raw) for raw in raw_blocks]

    @property
    def delta_text(self) -> Optional[str]:
        """Text carried by a ``content_block_delta`` text delta."""
        delta = self.data.get("delta")
        if isinstance(delta, dict) and delta.get("type") == "text_delta":
            return delta.get("text") or None
        return None


@dataclass(frozen=True)
class ExecutionStats:
    """Statistics reported by the final ``result`` event of a run."""

    duration_ms: int = 0
    duration_api_ms: int = 0
    num_turns: int = 0
    total_cost_usd: float = 0.0
    session_id: str = ""
    subtype: str = "success"
    is_error: bool = False

    @classmethod
    def from_event(cls, event: StreamEvent) -> Optional["ExecutionStats"]:
        """Build stats from a qualifying ``result`` event, else None."""
        if event.event_type != "result" or event.subtype not in QUALIFYING_RESULT_SUBTYPES:
            return None
        data = event.data
        return cls(
            duration_ms=data.get("duration_ms") or 0,
            duration_api_ms=data.get("duration_api_ms") or 0,
            num_turns=data.get("num_turns") or 0,
            total_cost_usd=float(data.get("total_cost_usd") or 0),
            session_id=data.get("session_id") or "",
            subtype=event.subtype,
            is_error=bool(data.get("is_error", False)),
        )


@dataclass
class ProcessResult:
    """Outcome of one driver run, produced when the child process exits."""

    exit_code: Optional[int]
    stderr_text: str = ""
    report_saved: bool = False
    report_path: Optional[Path] = None
    stats: Optional[ExecutionStats] = None
    message_count: int = 0
    events: list[StreamEvent] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.exit_code == 0
