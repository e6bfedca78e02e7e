"""The "press Enter to continue" gate shown after a report is produced."""

import asyncio
import enum
import os
import sys
from contextlib import contextmanager

try:
    import termios
    import tty
except ImportError:  # Windows: keys come from msvcrt instead
    termios = None
    tty = None

try:
    import msvcrt
except ImportError:
    msvcrt = None

from .logging import get_logger

ENTER_BYTES = (10, 13)
CTRL_C = 3
ABORT_EXIT_CODE = 130

_SETUP_ERRORS = (OSError, ValueError, NotImplementedError) + ((termios.error,) if termios else ())


class GateOutcome(enum.Enum):
    CONTINUE = "continue"
    ABORT = "abort"


class KeyGate:
    """Resolves on the first Enter or Ctrl+C byte; anything else is ignored."""

    def __init__(self):
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def feed(self, data: bytes) -> None:
        if self._future.done():
            return
        for byte in data:
            if byte == CTRL_C:
                self._future.set_result(GateOutcome.ABORT)
                return
            if byte in ENTER_BYTES:
                self._future.set_result(GateOutcome.CONTINUE)
                return

    def release(self) -> None:
        """Let the caller through without a key (input closed)."""
        if not self._future.done():
            self._future.set_result(GateOutcome.CONTINUE)

    async def wait(self) -> GateOutcome:
        """Wait for a decisive key. Ctrl+C ends the whole program."""
        outcome = await self._future
        if outcome is GateOutcome.ABORT:
            raise SystemExit(ABORT_EXIT_CODE)
        return outcome


@contextmanager
def raw_mode(fd: int):
    """Put the terminal in raw mode for the duration of the block."""
    previous = termios.tcgetattr(fd)
    tty.setraw(fd)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, previous)


def _on_readable(fd: int, gate: KeyGate) -> None:
    data = os.read(fd, 32)
    if data:
        gate.feed(data)
    else:
        gate.release()


async def _wait_raw_terminal(fd: int, gate: KeyGate) -> None:
    loop = asyncio.get_running_loop()
    with raw_mode(fd):
        loop.add_reader(fd, _on_readable, fd, gate)
        try:
            await gate.wait()
        finally:
            loop.remove_reader(fd)


async def _wait_console_keys(gate: KeyGate) -> None:
    # getwch reads the console unbuffered and returns Ctrl+C as "\x03"
    loop = asyncio.get_running_loop()
    while not gate.done:
        key = await loop.run_in_executor(None, msvcrt.getwch)
        gate.feed(key.encode("utf-8", errors="ignore"))
    await gate.wait()


async def wait_for_enter(stream=None) -> bool:
    """Block until Enter is pressed on ``stream`` (stdin by default).

    POSIX terminals are switched to raw mode; the Windows console is read
    key by key through msvcrt. Returns False without waiting when neither
    is available, so a non-interactive caller is never left hanging.
    """
    stream = stream or sys.stdin
    gate = KeyGate()
    try:
        fd = stream.fileno()
        if not os.isatty(fd):
            raise OSError("input is not an interactive terminal")
        if termios is not None:
            await _wait_raw_terminal(fd, gate)
        elif msvcrt is not None:
            await _wait_console_keys(gate)
        else:
            raise OSError("no way to read single keys on this platform")
    except _SETUP_ERRORS as e:
        get_logger().debug(f"Completion gate skipped: {e}")
        return False
    return True
