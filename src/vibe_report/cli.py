"""Command line interface for vibe-report."""

import asyncio
import os
import sys

import click
import questionary
from rich.text import Text

from .config import get_settings, reset_settings
from .executor.utils import format_size_kb
from .sessions import Project
from .tools import (
    agents_status,
    check_status,
    generate_local_report,
    prepare_report_prompt,
    setup_sub_agents,
    uninstall_sub_agents,
)
from .tools.generate import find_report_projects
from .ui import RULE, get_console


def _project_choice(project: Project) -> questionary.Choice:
    last = project.last_activity.strftime("%Y-%m-%d %H:%M") if project.last_activity else "never"
    title = f"{project.name}  ({project.session_count} sessions, {format_size_kb(project.size)}, last {last})"
    return questionary.Choice(title=title, value=project, checked=True)


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def _choose_projects(projects: list[Project]) -> list[Project]:
    selected = questionary.checkbox(
        "Select projects to analyze (SPACE to toggle, ENTER to confirm):",
        choices=[_project_choice(p) for p in projects],
    ).ask()
    return selected or []


@click.group()
@click.version_option(None, "-v", "--version", package_name="vibe-report")
@click.option("--debug", is_flag=True, help="Show diagnostic output while driving claude.")
def cli(debug):
    """Generate local productivity reports from your Claude Code sessions.

    Sessions are analyzed by the claude CLI using the vibe-log sub-agents,
    and the resulting HTML report is written to the current directory.
    """
    if debug:
        os.environ["VIBELOG_DEBUG"] = "1"
        reset_settings()


@cli.command("generate")
@click.option("-d", "--days", default=7, show_default=True, type=click.IntRange(min=1), help="Days of sessions to analyze.")
@click.option("-p", "--project", "project_names", multiple=True, help="Only analyze this project (repeatable).")
@click.option("--all", "all_projects", is_flag=True, help="Analyze every recent project without asking.")
@click.option("--claude-path", type=click.Path(dir_okay=False), help="Path to the claude executable.")
@click.option("--no-wait", is_flag=True, help="Don't wait for Enter after the report is written.")
def generate_cmd(days, project_names, all_projects, claude_path, no_wait):
    """Run claude to generate an HTML productivity report."""
    console = get_console()
    projects = find_report_projects(days, project_names)
    if not projects:
        console.print(f"No Claude Code sessions found in the last {days} days.", style="warning")
        sys.exit(1)

    if not (all_projects or project_names) and _is_interactive():
        projects = _choose_projects(projects)
        if not projects:
            click.echo("No projects selected.")
            return

    console.print(Text(f"📊 Analyzing {len(projects)} project(s) from the last {days} days", style="primary"))
    console.print()

    result = asyncio.run(
        generate_local_report(
            days=days,
            projects=projects,
            claude_path=claude_path,
            wait_for_key=not no_wait,
            console=console,
        )
    )

    if not result["success"]:
        console.print(Text(f"❌ {result['error']}", style="error"))
        if result.get("command"):
            console.print()
            console.print("You can run the analysis manually with:", style="muted")
            click.echo(result["command"])
        sys.exit(1)


@cli.command("prompt")
@click.option("-d", "--days", default=7, show_default=True, type=click.IntRange(min=1), help="Days of sessions to analyze.")
@click.option("-p", "--project", "project_names", multiple=True, help="Only analyze this project (repeatable).")
@click.option("--full", is_flag=True, help="Print the full prompt instead of the shell command.")
def prompt_cmd(days, project_names, full):
    """Print the report prompt for running claude by hand."""
    result = prepare_report_prompt(days, project_names)
    if not result["success"]:
        click.echo(result["error"], err=True)
        sys.exit(1)

    if full:
        click.echo(result["prompt"])
        return

    console = get_console()
    console.print(Text(result["description"], style="highlight"))
    console.print(Text(f"Projects: {', '.join(result['projects'])}", style="muted"))
    console.print(RULE, style="highlight")
    click.echo(result["command"])


@cli.group("agents")
def agents_group():
    """Manage the vibe-log sub-agents in ~/.claude/agents."""


@agents_group.command("status")
def agents_status_cmd():
    """Show which sub-agents are installed."""
    console = get_console()
    status = agents_status()
    console.print(Text(f"Agents directory: {status['path']}", style="muted"))
    for name in status["installed"]:
        console.print(Text(f"  ✓ {name}", style="success"))
    for name in status["missing"]:
        console.print(Text(f"  ✗ {name}", style="error"))
    console.print(f"{len(status['installed'])}/{status['total']} installed")
    if not status["ready"]:
        console.print("Run 'vibe-report agents install' to install the missing sub-agents.", style="warning")


@agents_group.command("install")
@click.option("--force", is_flag=True, help="Overwrite sub-agents that are already installed.")
def agents_install_cmd(force):
    """Install the bundled sub-agents."""
    console = get_console()
    result = setup_sub_agents(force=force)
    for name in result["installed"]:
        console.print(Text(f"  ✓ Installed {name}", style="success"))
    for name in result["skipped"]:
        console.print(Text(f"  - Skipped {name} (already installed)", style="muted"))
    for name in result["failed"]:
        console.print(Text(f"  ✗ Failed {name}", style="error"))
    if not result["success"]:
        sys.exit(1)
    console.print(Text(result["message"], style="info"))


@agents_group.command("remove")
@click.confirmation_option(prompt="Remove the vibe-log sub-agents?")
def agents_remove_cmd():
    """Remove the installed vibe-log sub-agents."""
    console = get_console()
    result = uninstall_sub_agents()
    for name in result["removed"]:
        console.print(Text(f"  ✓ Removed {name}", style="success"))
    for name in result["failed"]:
        console.print(Text(f"  ✗ Failed {name}", style="error"))
    if not result["success"]:
        sys.exit(1)
    console.print(Text(result["message"], style="info"))


@cli.command("status")
def status_cmd():
    """Check claude, the sub-agents and the session store."""
    console = get_console()
    status = check_status()

    if status["claude_installed"]:
        version = status["claude_version"] or "unknown version"
        console.print(Text(f"✓ claude: {status['claude_path']} ({version})", style="success"))
    else:
        console.print("✗ claude CLI not found. Install Claude Code: https://claude.ai/code", style="error")

    if not status["config_loaded"]:
        console.print(Text(f"✗ Configuration error: {status['config_error']}", style="error"))
        sys.exit(1)

    agents_style = "success" if status["sub_agents_installed"] == status["sub_agents_total"] else "warning"
    console.print(
        Text(f"Sub-agents: {status['sub_agents_installed']}/{status['sub_agents_total']} installed", style=agents_style)
    )
    console.print(Text(f"Projects with sessions: {status['project_count']}", style="info"))
    console.print(Text(f"Sessions directory: {get_settings().projects_dir}", style="muted"))


def main():
    cli()
