"""Local report generation tool."""

import shutil
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from ..agents import check_installed_sub_agents, install_sub_agents
from ..config import Settings, get_settings
from ..executor import AgentRunError, check_claude_available, execute_claude_prompt, find_claude
from ..executor.logging import get_logger
from ..prompts import build_orchestrated_prompt, get_executable_command
from ..sessions import (
    TEMP_SESSIONS_DIRNAME,
    Project,
    discover_projects,
    filter_recent,
    prefetch_sessions,
    select_projects,
)


def find_report_projects(
    days: int,
    project_names: Optional[Sequence[str]] = None,
    settings: Optional[Settings] = None,
) -> list[Project]:
    """Projects with sessions in the last ``days``, narrowed to ``project_names`` if given."""
    settings = settings or get_settings()
    projects = filter_recent(discover_projects(settings.projects_dir), days)
    if project_names:
        projects = select_projects(projects, project_names)
    return projects


def prepare_report_prompt(
    days: int = 7,
    project_names: Optional[Sequence[str]] = None,
    settings: Optional[Settings] = None,
) -> dict:
    """Build the report prompt without running claude.

    Returns:
        A dictionary with:
        - success: Whether any project matched
        - prompt / system_prompt: The orchestration prompt pair
        - command: Shell command that runs the prompt by hand
        - description: One-line summary of the analysis
        - projects: Names of the analyzed projects
    """
    projects = find_report_projects(days, project_names, settings)
    if not projects:
        return {"success": False, "error": _no_projects_message(days, project_names)}

    orchestrated = build_orchestrated_prompt(days, projects)
    return {
        "success": True,
        "prompt": orchestrated.prompt,
        "system_prompt": orchestrated.system_prompt,
        "command": get_executable_command(orchestrated.prompt),
        "description": orchestrated.description,
        "projects": [p.name for p in projects],
    }


def _no_projects_message(days: int, project_names: Optional[Sequence[str]]) -> str:
    if project_names:
        return f"No sessions in the last {days} days for: {', '.join(project_names)}"
    return f"No Claude Code sessions found in the last {days} days"


async def generate_local_report(
    days: int = 7,
    projects: Optional[Sequence[Project]] = None,
    project_names: Optional[Sequence[str]] = None,
    claude_path: Optional[str] = None,
    wait_for_key: bool = True,
    console: Optional[Console] = None,
    settings: Optional[Settings] = None,
    output_dir: Optional[Path] = None,
) -> dict:
    """Generate an HTML productivity report with the local claude CLI.

    Session files are copied into an isolated working directory first, so
    the run cannot touch project sources and doesn't add sessions to them.

    Args:
        days: Size of the analyzed window.
        projects: Projects to analyze. Discovered when omitted.
        project_names: Narrow discovered projects to these names.
        claude_path: Executable to run. Discovered when omitted.
        wait_for_key: Wait for Enter once the report is written.
        console: Console to render on.
        settings: Settings to use instead of the loaded ones.
        output_dir: Report directory. Defaults to the current directory.

    Returns:
        A dictionary with:
        - success: Whether claude ran to completion
        - report_saved / report_path: The written report, if any
        - stats: Execution statistics reported by claude
        - projects / sessions: What was analyzed
        - error: Error message if failed
        - command: Manual fallback command if the run failed
    """
    logger = get_logger()
    settings = settings or get_settings()

    agents = check_installed_sub_agents(settings.agents_dir)
    if agents["missing"]:
        logger.info(f"Installing missing sub-agents: {', '.join(agents['missing'])}")
        installed = install_sub_agents(settings.agents_dir)
        if installed["failed"]:
            return {
                "success": False,
                "error": f"Could not install sub-agents: {', '.join(installed['failed'])}",
            }

    if projects is None:
        projects = find_report_projects(days, project_names, settings)
    if not projects:
        return {"success": False, "error": _no_projects_message(days, project_names)}

    executable = claude_path or settings.claude_path or find_claude()
    if not executable:
        _, message = check_claude_available()
        return {"success": False, "error": message}

    orchestrated = build_orchestrated_prompt(days, projects)
    command = get_executable_command(orchestrated.prompt)
    workdir = settings.report_workdir
    temp_dir = workdir / TEMP_SESSIONS_DIRNAME

    try:
        try:
            prefetch = prefetch_sessions(projects, days, temp_dir, settings.large_file_bytes)
        except OSError as e:
            return {"success": False, "error": f"Failed to prepare session files: {e}", "command": command}

        if prefetch.total_sessions == 0:
            return {"success": False, "error": _no_projects_message(days, project_names)}

        try:
            result = await execute_claude_prompt(
                orchestrated.prompt,
                system_prompt=orchestrated.system_prompt,
                cwd=str(workdir),
                claude_path=executable,
                output_dir=output_dir or Path.cwd(),
                report_prefix=settings.report_prefix,
                site_url=settings.site_url,
                debug=settings.debug,
                console=console,
                wait_for_key=wait_for_key,
                spinner_interval=settings.spinner_interval,
            )
        except AgentRunError as e:
            return {"success": False, "error": str(e), "command": command}
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
        logger.debug(f"Removed temporary session files in {temp_dir}")

    return {
        "success": True,
        "report_saved": result.report_saved,
        "report_path": str(result.report_path) if result.report_path else None,
        "stats": result.stats,
        "message_count": result.message_count,
        "projects": [p.name for p in projects],
        "sessions": prefetch.total_sessions,
    }
