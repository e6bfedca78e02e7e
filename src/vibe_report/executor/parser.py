"""Incremental decoder for the newline-delimited JSON event stream."""

import codecs
from typing import Union

from .logging import get_logger
from .models import StreamEvent


class EventParser:
    """Turns arbitrary stdout chunks into complete StreamEvents.

    Chunks may split a line (or a UTF-8 sequence) anywhere; the unfinished
    tail is kept until the next chunk. Lines that are not JSON objects are
    logged and dropped without interrupting the stream.
    """

    def __init__(self, agent_role: str = "claude"):
        self._pending = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._role = agent_role
        self.discarded = 0

    def feed(self, chunk: Union[bytes, str]) -> list[StreamEvent]:
        """Consume one chunk and return the events completed by it, in order."""
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._pending += chunk

        lines = self._pending.split("\n")
        self._pending = lines.pop()

        events = []
        for line in lines:
            event = self._parse_line(line)
            if event is not None:
                events.append(event)
        return events

    def flush(self) -> list[StreamEvent]:
        """Parse whatever is left once the stream has ended."""
        self._pending += self._decoder.decode(b"", final=True)
        remainder, self._pending = self._pending, ""
        event = self._parse_line(remainder)
        return [event] if event is not None else []

    def _parse_line(self, line: str):
        line_str = line.strip()
        if not line_str:
            return None

        event = StreamEvent.from_json(line_str)
        if event is None:
            self.discarded += 1
            get_logger().debug(f"[{self._role}] Failed to parse JSON line: {line_str[:100]}")
        return event
