"""Bundled vibe-log sub-agents and their installation into ~/.claude/agents."""

import re
import shutil
from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field

from .executor.logging import get_logger

SUB_AGENT_FILES = (
    "vibe-log-session-analyzer.md",
    "vibe-log-report-generator.md",
)


class SubAgent(BaseModel):
    """A Claude Code sub-agent definition."""

    name: str = Field(description="Agent name used in Task(subagent_type=...)")
    description: str = Field(default="", description="When claude should delegate to the agent")
    tools: list[str] = Field(default_factory=list, description="Tools the agent may use")
    model: str = Field(default="inherit", description="Model the agent runs on")
    prompt: str = Field(description="System prompt body of the agent")
    file_path: Path = Field(description="Path to the agent markdown file")


def bundled_agents_dir() -> Path:
    return Path(__file__).resolve().parent / "default_agents"


def parse_agent_file(content: str, file_path: Path) -> SubAgent:
    """Parse an agent markdown file.

    Format:
    ---
    name: ...
    description: ...
    tools: Read, TodoWrite
    ---

    <prompt>
    """
    metadata = {}
    body = content

    frontmatter_match = re.match(r"^---\s*\n(.*?)\n---\s*\n", content, re.DOTALL)
    if frontmatter_match:
        try:
            metadata = yaml.safe_load(frontmatter_match.group(1)) or {}
        except yaml.YAMLError as e:
            get_logger().warning(f"Failed to parse frontmatter YAML in {file_path}: {e}")
        body = content[frontmatter_match.end():]

    tools = metadata.get("tools") or []
    if isinstance(tools, str):
        tools = [t.strip() for t in tools.split(",") if t.strip()]

    return SubAgent(
        name=metadata.get("name", file_path.stem),
        description=metadata.get("description", ""),
        tools=tools,
        model=metadata.get("model", "inherit"),
        prompt=body.strip(),
        file_path=file_path,
    )


def load_bundled_agents() -> list[SubAgent]:
    source_dir = bundled_agents_dir()
    return [
        parse_agent_file((source_dir / name).read_text(encoding="utf-8"), source_dir / name)
        for name in SUB_AGENT_FILES
    ]


def check_installed_sub_agents(agents_dir: Path) -> dict:
    """Which vibe-log sub-agents are present in ``agents_dir``."""
    installed = [name for name in SUB_AGENT_FILES if (agents_dir / name).is_file()]
    missing = [name for name in SUB_AGENT_FILES if name not in installed]
    return {
        "installed": installed,
        "missing": missing,
        "total": len(SUB_AGENT_FILES),
    }


def install_sub_agents(agents_dir: Path, force: bool = False) -> dict:
    """Copy the bundled sub-agents into ``agents_dir``.

    Existing files are kept unless ``force`` is set.

    Returns:
        A dictionary with:
        - installed: File names written
        - skipped: File names already present
        - failed: File names that could not be written
    """
    logger = get_logger()
    source_dir = bundled_agents_dir()
    installed, skipped, failed = [], [], []

    try:
        agents_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create agents directory {agents_dir}: {e}")
        return {"installed": [], "skipped": [], "failed": list(SUB_AGENT_FILES)}

    for name in SUB_AGENT_FILES:
        dest_path = agents_dir / name
        if dest_path.exists() and not force:
            skipped.append(name)
            continue
        try:
            shutil.copyfile(source_dir / name, dest_path)
            installed.append(name)
        except OSError as e:
            logger.error(f"Failed to install sub-agent {name}: {e}")
            failed.append(name)

    logger.info(f"Sub-agents installed: {len(installed)}, skipped: {len(skipped)}, failed: {len(failed)}")
    return {"installed": installed, "skipped": skipped, "failed": failed}


def remove_sub_agents(agents_dir: Path, names: Optional[Iterable[str]] = None) -> dict:
    """Delete installed vibe-log sub-agents (all of them when ``names`` is None)."""
    targets = SUB_AGENT_FILES if names is None else [n for n in names if n in SUB_AGENT_FILES]
    removed, failed = [], []
    for name in targets:
        path = agents_dir / name
        if not path.exists():
            continue
        try:
            path.unlink()
            removed.append(name)
        except OSError as e:
            get_logger().error(f"Failed to remove sub-agent {name}: {e}")
            failed.append(name)
    return {"removed": removed, "failed": failed}
