"""Tests for prompts module."""

from pathlib import Path

from vibe_report.executor.capture import REPORT_END, REPORT_START
from vibe_report.prompts import (
    SESSION_ANALYZER,
    build_orchestrated_prompt,
    describe_timeframe,
    get_executable_command,
)
from vibe_report.sessions import Project


def _project(name):
    return Project(name=name, claude_path=Path(f"/c/-{name}"), actual_path=f"/work/{name}", session_count=2)


class TestBuildOrchestratedPrompt:
    """Tests for build_orchestrated_prompt() function."""

    def test_prompt_contents(self):
        """The prompt points at the manifest, the sub-agent and the report markers."""
        result = build_orchestrated_prompt(7, [_project("alpha"), _project("beta")])

        assert ".vibe-log-temp/manifest.json" in result.prompt
        assert f'Task(subagent_type="{SESSION_ANALYZER}"' in result.prompt
        assert REPORT_START in result.prompt
        assert REPORT_END in result.prompt
        assert "- alpha: /work/alpha" in result.prompt
        assert "the last 7 days" in result.prompt
        assert result.description == "Comprehensive 7d analysis across 2 projects"

    def test_single_day(self):
        """A one-day report skips the activity pattern agent."""
        result = build_orchestrated_prompt(1, [_project("alpha")])

        assert "the last 24 hours" in result.prompt
        assert "Activity patterns" not in result.prompt
        assert result.description.endswith("1 project")

    def test_system_prompt_restricts_access(self):
        result = build_orchestrated_prompt(7, [_project("alpha")])

        assert "ORCHESTRATOR" in result.system_prompt
        assert ".vibe-log-temp/" in result.system_prompt

    def test_describe_timeframe(self):
        assert describe_timeframe(1) == "the last 24 hours"
        assert describe_timeframe(30) == "the last 30 days"


class TestGetExecutableCommand:
    """Tests for get_executable_command() function."""

    def test_escaping(self):
        """Shell-significant characters are escaped inside double quotes."""
        command = get_executable_command('say "hi" to $USER `now` \\ ok\nnext')

        assert command == 'claude "say \\"hi\\" to \\$USER \\`now\\` \\\\ ok\\nnext"'

    def test_custom_executable(self):
        assert get_executable_command("x", "/opt/claude") == '/opt/claude "x"'
