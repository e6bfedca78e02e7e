"""Tools package for vibe-report."""

from .agents import agents_status, setup_sub_agents, uninstall_sub_agents
from .generate import generate_local_report, prepare_report_prompt
from .status import check_status

__all__ = [
    "generate_local_report",
    "prepare_report_prompt",
    "agents_status",
    "setup_sub_agents",
    "uninstall_sub_agents",
    "check_status",
]
