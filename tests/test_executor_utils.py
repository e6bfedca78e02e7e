"""Tests for executor utils and errors."""

from datetime import datetime

from vibe_report.executor.errors import AbnormalExit, AgentRunError, ProcessTerminated, SpawnError
from vibe_report.executor.utils import (
    format_duration,
    format_elapsed,
    format_size_kb,
    format_timestamp,
    strip_ansi,
    truncate,
)


class TestStripAnsi:
    """Tests for strip_ansi() function."""

    def test_strip_ansi_with_ansi_codes(self):
        """Colour codes are removed."""
        assert strip_ansi("\x1b[31mRed text\x1b[0m") == "Red text"

    def test_strip_ansi_with_multiple_codes(self):
        """Several codes in one string are all removed."""
        text = "\x1b[31mRed\x1b[0m \x1b[32mGreen\x1b[0m \x1b[1;34mBlue\x1b[0m"

        assert strip_ansi(text) == "Red Green Blue"

    def test_strip_ansi_with_normal_text(self):
        """Plain text is unchanged."""
        assert strip_ansi("Normal text") == "Normal text"
        assert strip_ansi("") == ""


class TestFormatting:
    """Tests for the formatting helpers."""

    def test_format_timestamp(self):
        assert format_timestamp(datetime(2024, 1, 1, 9, 5, 3)) == "[09:05:03]"

    def test_format_elapsed(self):
        """Elapsed time is whole seconds."""
        start = datetime(2024, 1, 1, 9, 0, 0)

        assert format_elapsed(start, datetime(2024, 1, 1, 9, 0, 12, 900000)) == "+12s"

    def test_format_duration(self):
        """Durations under a minute show seconds only."""
        assert format_duration(45_000) == "45s"
        assert format_duration(999) == "0s"
        assert format_duration(125_000) == "2m 5s"

    def test_format_size_kb(self):
        assert format_size_kb(2048) == "2.00 KB"

    def test_truncate(self):
        """Long text is cut and marked."""
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"


class TestErrors:
    """Tests for the driver error taxonomy."""

    def test_hierarchy(self):
        """Every driver error is an AgentRunError."""
        assert issubclass(SpawnError, AgentRunError)
        assert issubclass(ProcessTerminated, AbnormalExit)

    def test_spawn_error(self):
        error = SpawnError("/bin/claude", "No such file or directory")

        assert str(error) == "Failed to start /bin/claude: No such file or directory"

    def test_abnormal_exit_message(self):
        """The message carries the code, stderr and hints."""
        error = AbnormalExit(127, "  not found\n", ["Try the full path."])

        assert str(error) == (
            "Claude exited with code 127\n\n"
            "Claude stderr output:\nnot found\n\n"
            "Try the full path."
        )

    def test_abnormal_exit_without_stderr(self):
        """Empty stderr is omitted."""
        assert str(AbnormalExit(2, "   ")) == "Claude exited with code 2"

    def test_terminated(self):
        """Killed processes have their own headline."""
        error = ProcessTerminated(-9, "")

        assert str(error) == "Claude process terminated unexpectedly"
        assert error.exit_code == -9
