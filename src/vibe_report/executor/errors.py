"""Errors raised by the Claude process driver."""

from typing import Optional


class AgentRunError(Exception):
    """A run of the external agent failed and produced nothing usable."""


class SpawnError(AgentRunError):
    """The agent executable could not be launched."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        self.reason = reason
        super().__init__(f"Failed to start {executable}: {reason}")


class AbnormalExit(AgentRunError):
    """The agent process exited with a non-zero code."""

    def __init__(
        self,
        exit_code: Optional[int],
        stderr_text: str = "",
        hints: Optional[list[str]] = None,
    ):
        self.exit_code = exit_code
        self.stderr_text = stderr_text
        self.hints = hints or []
        super().__init__(self._build_message())

    def _headline(self) -> str:
        return f"Claude exited with code {self.exit_code}"

    def _build_message(self) -> str:
        parts = [self._headline()]
        if self.stderr_text.strip():
            parts.append(f"Claude stderr output:\n{self.stderr_text.strip()}")
        parts.extend(self.hints)
        return "\n\n".join(parts)


class ProcessTerminated(AbnormalExit):
    """The agent process was killed by a signal instead of exiting."""

    def _headline(self) -> str:
        return "Claude process terminated unexpectedly"
