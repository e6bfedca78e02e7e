"""Terminal writer shared by the spinner timer and the event handlers."""

import asyncio
from typing import Optional

from rich.console import Console
from rich.text import Text

SPINNER_FRAMES = {
    "dots": ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"],
    "dots2": ["⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷"],
    "line": ["─", "\\", "|", "/"],
}

ERASE_LINE = "\r" + " " * 80 + "\r"


class Spinner:
    """Cycles through animation frames next to a status message."""

    def __init__(self, style: str = "dots2", message: str = "Processing..."):
        self._frames = SPINNER_FRAMES.get(style, SPINNER_FRAMES["dots"])
        self._index = 0
        self.message = message

    def next(self) -> str:
        frame = self._frames[self._index]
        self._index = (self._index + 1) % len(self._frames)
        return f"{frame} {self.message}"

    def set_message(self, message: str) -> None:
        self.message = message


class Display:
    """Console wrapper that keeps spinner redraws and printed lines apart.

    Every write goes through ``print`` or ``write_raw``: the spinner line is
    erased first and redrawn afterwards while the spinner is running.
    """

    def __init__(self, console: Console, interval: float = 0.1):
        self.console = console
        self.interval = interval
        self.spinner: Optional[Spinner] = None
        self._task: Optional[asyncio.Task] = None
        self._line_open = False

    @property
    def spinner_running(self) -> bool:
        return self._task is not None

    def start_spinner(self, message: str = "Processing...") -> None:
        """Start the periodic redraw. Must be called from a running event loop."""
        if self.spinner is None:
            self.spinner = Spinner("dots2", message)
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._tick())

    def stop_spinner(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        if not self._line_open:
            self._erase()

    def set_status(self, message: str) -> None:
        if self.spinner is not None:
            self.spinner.set_message(message)

    def print(self, *objects, style: Optional[str] = None) -> None:
        """Print a line without corrupting the spinner row."""
        self.end_line()
        running = self.spinner_running
        if running:
            self._erase()
        self.console.print(*objects, style=style)
        if running:
            self._draw()

    def text(self, content: str, style: Optional[str] = None) -> None:
        """Print agent-provided text verbatim (no markup interpretation)."""
        self.print(Text(content, style=style or ""))

    def write_raw(self, content: str) -> None:
        """Write streamed text as-is, clearing the spinner row first.

        The spinner is not drawn over an unfinished streamed line; it
        reappears once ``end_line`` (or the next ``print``) closes it.
        """
        if not content:
            return
        if self.spinner_running and not self._line_open:
            self._erase()
        self.console.file.write(content)
        self.console.file.flush()
        self._line_open = not content.endswith("\n")

    def end_line(self) -> None:
        """Terminate a streamed line left open by ``write_raw``."""
        if self._line_open:
            self.console.file.write("\n")
            self.console.file.flush()
            self._line_open = False

    async def _tick(self) -> None:
        while True:
            self._draw()
            await asyncio.sleep(self.interval)

    def _draw(self) -> None:
        if self.spinner is None or self._line_open:
            return
        self.console.file.write("\r")
        self.console.print(Text(self.spinner.next() + "   ", style="primary"), end="")
        self.console.file.flush()

    def _erase(self) -> None:
        self.console.file.write(ERASE_LINE)
        self.console.file.flush()
