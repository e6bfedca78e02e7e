"""Extraction of the delimited HTML report from streamed narrative text."""

import enum
from dataclasses import dataclass, field

REPORT_START = "=== REPORT START ==="
REPORT_END = "=== REPORT END ==="


class CaptureState(enum.Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    DONE = "done"


@dataclass
class CaptureStep:
    """What one text block did to the capture.

    ``narrative`` holds the pieces of the block that are ordinary text and
    should be shown to the user, in their original order.
    """
    narrative: list[str] = field(default_factory=list)
    started: bool = False
    finished: bool = False


class ReportCapture:
    """IDLE -> CAPTURING -> DONE state machine over assistant text blocks."""

    def __init__(self):
        self.state = CaptureState.IDLE
        self._parts: list[str] = []

    @property
    def capturing(self) -> bool:
        return self.state is CaptureState.CAPTURING

    @property
    def content(self) -> str:
        """Raw captured text (untrimmed)."""
        return "".join(self._parts)

    @property
    def report(self) -> str:
        """The finalized report, or an empty string if none was completed."""
        if self.state is not CaptureState.DONE:
            return ""
        return self.content.strip()

    def take_report(self) -> str:
        """Hand the finalized report over and release the buffer."""
        report = self.report
        self._parts = []
        return report

    def process(self, text: str) -> CaptureStep:
        """Feed one text block through the state machine."""
        if self.state is CaptureState.DONE:
            return CaptureStep(narrative=[text])

        start = text.find(REPORT_START)
        end = text.find(REPORT_END, start + len(REPORT_START)) if start >= 0 else -1

        if start >= 0 and end >= 0:
            body = text[start + len(REPORT_START):end]
            self._parts = [body]
            self.state = CaptureState.DONE
            return CaptureStep(
                narrative=[text[:start], text[end + len(REPORT_END):]],
                started=True,
                finished=True,
            )

        if self.state is CaptureState.CAPTURING and REPORT_END in text:
            before, _, after = text.partition(REPORT_END)
            self._parts.append(before)
            self.state = CaptureState.DONE
            return CaptureStep(narrative=[after], finished=True)

        if start >= 0:
            after = text[start + len(REPORT_START):]
            self._parts = [after]
            self.state = CaptureState.CAPTURING
            return CaptureStep(narrative=[text[:start]], started=True)

        if self.state is CaptureState.CAPTURING:
            self._parts.append(text)
            return CaptureStep()

        return CaptureStep(narrative=[text])
