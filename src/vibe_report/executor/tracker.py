"""Reflects stream events onto the terminal and tracks run state."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from rich.text import Text

from .capture import ReportCapture
from .display import Display
from .logging import get_logger
from .models import (
    ExecutionStats,
    StreamEvent,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
)
from .utils import format_elapsed, format_timestamp, truncate

# Top-level event types some agent builds emit for tool activity.
TOOL_CALL_EVENT_TYPES = ("tool_use", "function_call", "tool_call", "tools")
TOOL_RESULT_EVENT_TYPES = ("tool_result", "function_result", "tool_response")


@dataclass
class DriverState:
    """Mutable state of one driver run."""
    spinner_active: bool = False
    result_received: bool = False
    has_shown_thinking: bool = False
    last_response_time: Optional[datetime] = None
    message_count: int = 0
    execution_stats: Optional[ExecutionStats] = None
    capture: ReportCapture = field(default_factory=ReportCapture)
    events: list[StreamEvent] = field(default_factory=list)
    stderr_parts: list[str] = field(default_factory=list)

    @property
    def stderr_text(self) -> str:
        return "".join(self.stderr_parts)


class EventTracker:
    """Dispatches each StreamEvent to the handler for its type."""

    def __init__(
        self,
        display: Display,
        state: Optional[DriverState] = None,
        debug: bool = False,
        clock: Callable[[], datetime] = datetime.now,
        agent_role: str = "claude",
    ):
        self.display = display
        self.state = state or DriverState()
        self.debug = debug
        self._clock = clock
        self._role = agent_role
        self._logger = get_logger()
        self._handlers: dict[str, Callable[[StreamEvent, datetime], None]] = {
            "system": self._on_system,
            "user": self._on_user,
            "assistant": self._on_assistant,
            "result": self._on_result,
            "message_start": self._on_message_start,
            "content_block_start": self._on_content_block_start,
            "content_block_delta": self._on_content_block_delta,
            "message_stop": self._on_message_stop,
        }
        for event_type in TOOL_CALL_EVENT_TYPES:
            self._handlers[event_type] = self._on_tool_call_event
        for event_type in TOOL_RESULT_EVENT_TYPES:
            self._handlers[event_type] = self._on_tool_result_event

    def handle(self, event: StreamEvent) -> None:
        """Apply one event. Never raises."""
        self.state.events.append(event)
        self._logger.debug(f"[{self._role}] Event: type={event.event_type}, subtype={event.subtype}")
        handler = self._handlers.get(event.event_type, self._on_unknown)
        try:
            handler(event, self._clock())
        except Exception:
            self._logger.debug(f"[{self._role}] Failed to handle {event.event_type} event", exc_info=True)

    def handle_stderr(self, text: str) -> None:
        self.state.stderr_parts.append(text)
        self._logger.debug(f"[{self._role}] stderr: {text.rstrip()}")
        if "Error:" in text or "error:" in text:
            self.display.text(f"Claude error: {text.strip()}", style="error")

    # -- helpers ---------------------------------------------------------

    def _stamp(self, now: datetime) -> Text:
        return Text(format_timestamp(now), style="dim")

    def _line(self, now: datetime, message: str, style: str, icon: str = "") -> None:
        line = self._stamp(now)
        line.append(" ")
        if icon:
            line.append(icon + " ")
        line.append(message, style=style)
        self.display.print(line)

    def _debug_line(self, message: str) -> None:
        if self.debug:
            self.display.text(message, style="dim")

    def _start_spinner(self, message: str) -> None:
        self.display.start_spinner(message)
        self.state.spinner_active = True

    def _stop_spinner(self) -> None:
        self.display.stop_spinner()
        self.state.spinner_active = False

    # -- handlers --------------------------------------------------------

    def _on_system(self, event: StreamEvent, now: datetime) -> None:
        if event.subtype != "init":
            self._logger.debug(f"[{self._role}] system/{event.subtype} ignored")
            return
        self._line(now, "Claude is initializing...", "muted")
        self._start_spinner("Processing...")

    def _on_user(self, event: StreamEvent, now: datetime) -> None:
        for block in event.content:
            if isinstance(block, ToolResultBlock):
                if block.is_error:
                    self._line(now, "Tool failed", "error", icon="❌")
                else:
                    self._line(now, "Tool completed", "success", icon="✓")
                    if block.content:
                        self._debug_line(f"     Result: {truncate(str(block.content), 100)}")
                self.display.set_status("Processing tool results...")
            elif isinstance(block, UnknownBlock):
                self._debug_line(f"[DEBUG] Unknown content type in user message: {block.block_type}")

    def _on_assistant(self, event: StreamEvent, now: datetime) -> None:
        for block in event.content:
            if isinstance(block, TextBlock):
                if block.text:
                    self._on_text(block.text, now)
            elif isinstance(block, ToolUseBlock):
                self._on_tool_use(block, now)
            else:
                self._debug_line(f"[DEBUG] Unknown content type in assistant message: {block.block_type}")

    def _on_text(self, text: str, now: datetime) -> None:
        state = self.state
        state.message_count += 1

        time_info = self._stamp(now)
        if state.last_response_time is not None:
            time_info.append(" " + format_elapsed(state.last_response_time, now), style="dim")

        if not state.has_shown_thinking:
            self.display.print(time_info + Text(" Claude is responding...", style="muted"))
            state.has_shown_thinking = True

        step = state.capture.process(text)
        if step.started:
            self.display.print(time_info + Text(" 📝 Generating HTML report...", style="success"))

        if step.started or step.finished or state.capture.capturing:
            for segment in step.narrative:
                if segment.strip():
                    self.display.text("  " + segment.strip())
            if state.capture.capturing and not self.display.spinner_running:
                size_kb = len(state.capture.content) / 1024
                self.display.print(time_info + Text(f" Generating report... ({size_kb:.1f} KB)", style="muted"))
            if step.finished:
                self._logger.debug(f"[{self._role}] Report captured: {len(state.capture.content)} chars")
        else:
            self.display.print(time_info + Text(" ━━━", style="accent"))
            for line in text.split("\n"):
                self.display.text("  " + line)
            self.display.print()

        state.last_response_time = now
        self.display.set_status(f"Waiting for next response... ({state.message_count} messages so far)")

    def _on_tool_use(self, block: ToolUseBlock, now: datetime) -> None:
        if block.subagent_type:
            self._line(now, f"Launching sub-agent: {block.subagent_type}...", "accent", icon="🚀")
        else:
            self._line(now, f"Calling {block.name}...", "primary", icon="🔧")
        if block.input:
            self._debug_line(f"     Input: {truncate(json.dumps(block.input), 200)}")
        self.display.set_status(f"Running {block.name}...")

    def _on_result(self, event: StreamEvent, now: datetime) -> None:
        stats = ExecutionStats.from_event(event)
        if stats is not None:
            self.state.execution_stats = stats
            self._logger.debug(f"[{self._role}] Captured execution stats: {stats}")

        self.state.result_received = True
        self._stop_spinner()

        result_text = event.data.get("result")
        if result_text and "message" not in event.data:
            self._line(now, "Final result:", "success")
            self.display.text(str(result_text))

    def _on_message_start(self, event: StreamEvent, now: datetime) -> None:
        self._line(now, "Claude is starting...", "muted")

    def _on_content_block_start(self, event: StreamEvent, now: datetime) -> None:
        if not self.state.has_shown_thinking:
            self._line(now, "Claude is thinking...", "muted")
            self.state.has_shown_thinking = True

    def _on_content_block_delta(self, event: StreamEvent, now: datetime) -> None:
        text = event.delta_text
        if text:
            # paused while the message streams; message_stop resumes it
            if self.display.spinner_running:
                self._stop_spinner()
            self.display.write_raw(text)

    def _on_message_stop(self, event: StreamEvent, now: datetime) -> None:
        self.display.end_line()
        paused = self.display.spinner is not None and not self.display.spinner_running
        if paused and not self.state.result_received:
            self._start_spinner(self.display.spinner.message)

    def _on_tool_call_event(self, event: StreamEvent, now: datetime) -> None:
        data = event.data
        tool_name = data.get("name") or data.get("tool") or data.get("function") or "Unknown tool"
        self._line(now, f"Running {tool_name}...", "primary", icon="🔧")
        self.display.set_status(f"Executing {tool_name}...")

    def _on_tool_result_event(self, event: StreamEvent, now: datetime) -> None:
        self._line(now, "Tool completed", "success", icon="✓")
        self.display.set_status("Processing results...")

    def _on_unknown(self, event: StreamEvent, now: datetime) -> None:
        keys = ", ".join(event.data.keys())
        self._logger.debug(
            f"[{self._role}] Unhandled message type: {event.event_type} (subtype={event.subtype}, keys={keys})"
        )
        self._debug_line(f"[DEBUG] {format_timestamp(now)} Unhandled: type={event.event_type}, keys={keys}")
