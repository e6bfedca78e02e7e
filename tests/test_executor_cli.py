"""Tests for executor CLI functions."""

import os
import subprocess
from unittest.mock import MagicMock, patch

from vibe_report.executor.cli import (
    check_claude_available,
    check_claude_installed,
    find_claude,
    get_claude_version,
)


class TestFindClaude:
    """Tests for find_claude() function."""

    def test_find_claude_in_path(self):
        """claude on PATH is used first."""
        with patch("shutil.which", return_value="/usr/bin/claude") as mock_which:
            assert find_claude() == "/usr/bin/claude"
            mock_which.assert_called_once_with("claude")

    def test_find_claude_in_local_install(self):
        """The per-user install location is checked next."""
        expected = os.path.expanduser("~/.claude/local/claude")
        with patch("shutil.which", return_value=None), \
             patch("os.path.isfile", side_effect=lambda path: path == expected), \
             patch("os.access", side_effect=lambda path, mode: path == expected):
            assert find_claude() == expected

    def test_find_claude_in_homebrew(self):
        """Homebrew's prefix is the last candidate."""
        with patch("shutil.which", return_value=None), \
             patch("os.path.isfile", side_effect=lambda path: path == "/opt/homebrew/bin/claude"), \
             patch("os.access", return_value=True):
            assert find_claude() == "/opt/homebrew/bin/claude"

    def test_find_claude_not_executable(self):
        """Files without the execute bit are skipped."""
        with patch("shutil.which", return_value=None), \
             patch("os.path.isfile", return_value=True), \
             patch("os.access", return_value=False):
            assert find_claude() is None


class TestClaudeVersion:
    """Tests for get_claude_version() and check_claude_installed()."""

    def test_version(self):
        completed = MagicMock(returncode=0, stdout="1.0.80 (Claude Code)\n")
        with patch("subprocess.run", return_value=completed):
            assert get_claude_version("/usr/bin/claude") == "1.0.80 (Claude Code)"

    def test_version_failure(self):
        """Errors and non-zero exits yield no version."""
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("claude", 10)):
            assert get_claude_version("claude") is None
        with patch("subprocess.run", return_value=MagicMock(returncode=1, stdout="")):
            assert get_claude_version("claude") is None

    def test_check_installed(self):
        with patch("vibe_report.executor.cli.find_claude", return_value="/usr/bin/claude"), \
             patch("vibe_report.executor.cli.get_claude_version", return_value="1.0.0"):
            assert check_claude_installed() == (True, "/usr/bin/claude", "1.0.0")

    def test_check_not_installed(self):
        with patch("vibe_report.executor.cli.find_claude", return_value=None):
            assert check_claude_installed() == (False, None, None)


class TestCheckClaudeAvailable:
    """Tests for check_claude_available() function."""

    def test_available(self):
        with patch("vibe_report.executor.cli.find_claude", return_value="/usr/bin/claude"):
            available, message = check_claude_available()

        assert available is True
        assert "/usr/bin/claude" in message

    def test_not_available(self):
        """The message points at the install page."""
        with patch("vibe_report.executor.cli.find_claude", return_value=None):
            available, message = check_claude_available()

        assert available is False
        assert "https://claude.ai/code" in message
