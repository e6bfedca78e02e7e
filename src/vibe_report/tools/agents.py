"""Sub-agent setup tools."""

from ..agents import check_installed_sub_agents, install_sub_agents, remove_sub_agents
from ..config import get_settings


def agents_status() -> dict:
    """Report which vibe-log sub-agents are installed.

    Returns:
        A dictionary with:
        - path: The Claude agents directory
        - installed / missing: File names
        - total: Number of bundled sub-agents
        - ready: Whether nothing is missing
    """
    agents_dir = get_settings().agents_dir
    status = check_installed_sub_agents(agents_dir)
    return {
        "path": str(agents_dir),
        **status,
        "ready": not status["missing"],
    }


def setup_sub_agents(force: bool = False) -> dict:
    """Install the bundled sub-agents into the Claude agents directory.

    Args:
        force: If True, overwrites existing files. Default is False.
    """
    agents_dir = get_settings().agents_dir
    result = install_sub_agents(agents_dir, force=force)
    return {
        "success": not result["failed"],
        "path": str(agents_dir),
        **result,
        "message": f"Installed {len(result['installed'])} sub-agents in {agents_dir}",
    }


def uninstall_sub_agents() -> dict:
    """Remove the vibe-log sub-agents; other agent files are left alone."""
    agents_dir = get_settings().agents_dir
    result = remove_sub_agents(agents_dir)
    return {
        "success": not result["failed"],
        "path": str(agents_dir),
        **result,
        "message": f"Removed {len(result['removed'])} sub-agents from {agents_dir}",
    }
