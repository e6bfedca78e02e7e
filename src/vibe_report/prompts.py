"""Prompts that make claude orchestrate the bundled sub-agents into a report."""

from dataclasses import dataclass
from typing import Sequence

from .executor.capture import REPORT_END, REPORT_START
from .sessions import TEMP_SESSIONS_DIRNAME, Project

SESSION_ANALYZER = "vibe-log-session-analyzer"


@dataclass
class OrchestratedPrompt:
    prompt: str
    system_prompt: str
    command: str
    description: str


SYSTEM_PROMPT = f"""You are a vibe-log ORCHESTRATOR. Your ONLY job is to coordinate sub-agents.

CRITICAL RULES:
- DO NOT analyze session files yourself - delegate ALL analysis to sub-agents
- DO NOT use Grep, Read (except the manifest), or other analysis tools on session files
- Your role: Read manifest -> Launch agents -> Collect results -> Generate report

FILE ACCESS RESTRICTIONS:
- ALL agents must ONLY access files in {TEMP_SESSIONS_DIRNAME}/
- Agents must NOT access project source code or any files outside {TEMP_SESSIONS_DIRNAME}/

COMMUNICATION:
- Announce each phase clearly
- Show which agents are being launched
- Keep the user informed but be an orchestrator, not an analyst"""


def describe_timeframe(days: int) -> str:
    return "the last 24 hours" if days == 1 else f"the last {days} days"


def _agent_task(focus: str, steps: str) -> str:
    return (
        f'Task(subagent_type="{SESSION_ANALYZER}", prompt="Only access {TEMP_SESSIONS_DIRNAME}/. '
        f'Read {TEMP_SESSIONS_DIRNAME}/manifest.json first and respect isLarge (sample large files). '
        f'{steps} Skip files that fail to read.")  # {focus}'
    )


def build_orchestrated_prompt(days: int, projects: Sequence[Project]) -> OrchestratedPrompt:
    """Build the prompt pair for a report over ``projects`` covering ``days``."""
    timeframe_desc = describe_timeframe(days)
    project_list = "\n".join(f"- {p.name}: {p.actual_path}" for p in projects)

    agents = [
        _agent_task("Productivity metrics", "Calculate coding hours, sessions per project and average session duration."),
        _agent_task("Tool usage", "Count Read, Write, Edit and Bash operations."),
        _agent_task("Key accomplishments", "Extract 3-5 concrete accomplishments: commits, features, bug fixes."),
    ]
    if days > 1:
        agents.append(
            _agent_task("Activity patterns", "Find peak productivity times and session frequency from timestamps.")
        )

    prompt = f"""Analyze my Claude Code sessions from {timeframe_desc} using vibe-log sub-agents.

Session files have been copied to: {TEMP_SESSIONS_DIRNAME}/
Manifest available at: {TEMP_SESSIONS_DIRNAME}/manifest.json

Projects to analyze:
{project_list}

## Phase 1 - Discovery
Read ONLY {TEMP_SESSIONS_DIRNAME}/manifest.json.
Output: "Found X sessions across Y projects, launching parallel analysis..."

## Phase 2 - Parallel agents
Launch ALL of these in a SINGLE message:
{chr(10).join(agents)}

## Phase 3 - Report
Combine the agent results into one self-contained, styled HTML document with an
executive summary, productivity metrics, tool usage, key accomplishments,
activity patterns and a project-by-project breakdown.

- First output the line: {REPORT_START}
- Then output the complete HTML document
- Finally output the line: {REPORT_END}

Do NOT use the Write tool. OUTPUT the HTML directly between the markers."""

    count = len(projects)
    return OrchestratedPrompt(
        prompt=prompt,
        system_prompt=SYSTEM_PROMPT,
        command=f'claude "Analyze my Claude Code sessions from {timeframe_desc} using vibe-log sub-agents..."',
        description=f"Comprehensive {days}d analysis across {count} project{'' if count == 1 else 's'}",
    )


def get_executable_command(prompt: str, executable: str = "claude") -> str:
    """Shell-escaped ``claude "<prompt>"`` for running by hand."""
    escaped = (
        prompt.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("`", "\\`")
        .replace("\n", "\\n")
    )
    return f'{executable} "{escaped}"'
