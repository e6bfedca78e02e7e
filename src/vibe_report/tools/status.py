"""Status check tool."""

from ..agents import check_installed_sub_agents
from ..config import get_settings
from ..executor import check_claude_installed
from ..sessions import discover_projects


def check_status() -> dict:
    """Check the state of everything a local report depends on.

    Returns information about:
    - Whether the claude CLI is installed, and its version
    - Whether the vibe-log sub-agents are installed
    - How many Claude Code projects have sessions
    """
    installed, path, version = check_claude_installed()

    try:
        settings = get_settings()
        config_loaded = True
        config_error = None
    except Exception as e:
        return {
            "claude_installed": installed,
            "claude_path": path,
            "claude_version": version,
            "config_loaded": False,
            "config_error": str(e),
            "sub_agents_installed": 0,
            "sub_agents_total": 0,
            "project_count": 0,
        }

    agents = check_installed_sub_agents(settings.agents_dir)
    projects = discover_projects(settings.projects_dir)

    return {
        "claude_installed": installed,
        "claude_path": path,
        "claude_version": version,
        "config_loaded": config_loaded,
        "config_error": config_error,
        "sub_agents_installed": len(agents["installed"]),
        "sub_agents_total": agents["total"],
        "project_count": len(projects),
    }
