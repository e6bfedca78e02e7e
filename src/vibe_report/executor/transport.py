"""How the prompt reaches the claude process.

Two strategies produce the same stream-json output; only the delivery of
the prompt differs. The strategy is chosen once per run from the platform.
"""

import os
import sys
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .logging import get_logger

STREAM_FLAGS = ["--output-format", "stream-json", "--verbose"]


@dataclass
class Invocation:
    """A fully built command line plus anything that must be cleaned up."""
    program: str
    args: list[str]
    delivery: str
    temp_files: list[Path] = field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


class DirectArgumentTransport:
    """POSIX: the prompt is passed as the trailing command argument."""

    name = "direct"
    delivery = "command argument"

    def prepare(self, executable: str, prompt: str, system_prompt: Optional[str] = None) -> Invocation:
        args = ["-p"]
        if system_prompt:
            args += ["--append-system-prompt", system_prompt]
        args += [*STREAM_FLAGS, prompt]
        return Invocation(program=executable, args=args, delivery=self.delivery)

    def cleanup(self, invocation: Invocation) -> None:
        return None

    def error_hints(self, stderr_text: str) -> list[str]:
        return []


def _ps_literal(value: str) -> str:
    """Quote a value as a PowerShell single-quoted (verbatim) string."""
    return "'" + value.replace("'", "''") + "'"


class PowerShellPipeTransport:
    """Windows: the prompt goes through a temp file piped into stdin.

    Command-line length limits and batch-file stdin handling make the
    direct form unreliable there.
    """

    name = "powershell-pipe"
    delivery = "PowerShell pipe from temp file"

    def __init__(self, shell: str = "powershell.exe", temp_dir: Optional[str] = None):
        self.shell = shell
        self.temp_dir = temp_dir

    def prepare(self, executable: str, prompt: str, system_prompt: Optional[str] = None) -> Invocation:
        fd, name = tempfile.mkstemp(
            prefix=f"claude-prompt-{int(time.time() * 1000)}-",
            suffix=".txt",
            dir=self.temp_dir,
        )
        prompt_file = Path(name)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(prompt)
        get_logger().debug(f"Wrote prompt to temp file: {prompt_file} ({len(prompt)} chars)")

        claude_args = ["-p"]
        if system_prompt:
            claude_args += ["--append-system-prompt", _ps_literal(system_prompt)]
        claude_args += STREAM_FLAGS

        command = (
            f"Get-Content -Path {_ps_literal(str(prompt_file))} -Raw | "
            f"& {_ps_literal(executable)} {' '.join(claude_args)}"
        )
        return Invocation(
            program=self.shell,
            args=["-NoProfile", "-Command", command],
            delivery=self.delivery,
            temp_files=[prompt_file],
        )

    def cleanup(self, invocation: Invocation) -> None:
        for path in invocation.temp_files:
            try:
                path.unlink()
            except OSError as e:
                get_logger().debug(f"Could not remove temp prompt file {path}: {e}")

    def error_hints(self, stderr_text: str) -> list[str]:
        hints = []
        if "command not found" in stderr_text or "is not recognized" in stderr_text:
            hints.append(
                "Windows-specific issue: Claude command may not be in PATH or needs full path."
            )
        if "Access is denied" in stderr_text or "Permission denied" in stderr_text:
            hints.append(
                "Windows-specific issue: Permission denied. Try running as administrator."
            )
        return hints


def select_transport(platform: Optional[str] = None):
    """Pick the transport strategy for ``platform`` (defaults to this one)."""
    platform = platform or sys.platform
    if platform == "win32":
        return PowerShellPipeTransport()
    return DirectArgumentTransport()
