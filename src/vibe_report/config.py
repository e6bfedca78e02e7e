"""Configuration for vibe-report."""

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from .executor.logging import get_logger

_settings: Optional["Settings"] = None


def _default_home() -> Path:
    return Path.home() / ".vibe-log"


def _default_claude_home() -> Path:
    return Path.home() / ".claude"


class Settings(BaseModel):
    """Runtime settings."""

    claude_path: Optional[str] = Field(
        default=None,
        description="Explicit path to the claude executable (discovered when unset)",
    )
    report_prefix: str = Field(
        default="vibe-log-report",
        description="File name prefix of generated reports",
    )
    site_url: str = Field(
        default="https://vibe-log.dev",
        description="Site linked from the report footer",
    )
    debug: bool = Field(default=False, description="Print diagnostic lines while driving claude")
    home_dir: Path = Field(
        default_factory=_default_home,
        description="Directory for vibe-report state (config, logs, temp workdirs)",
    )
    claude_home: Path = Field(
        default_factory=_default_claude_home,
        description="Claude Code home holding projects/ and agents/",
    )
    spinner_interval: float = Field(default=0.1, gt=0, description="Seconds between spinner redraws")
    large_file_bytes: int = Field(
        default=100_000,
        description="Session files above this size are marked for partial reads",
    )

    @property
    def projects_dir(self) -> Path:
        return self.claude_home / "projects"

    @property
    def agents_dir(self) -> Path:
        return self.claude_home / "agents"

    @property
    def report_workdir(self) -> Path:
        """Isolated cwd for the claude run, so it doesn't add sessions to real projects."""
        return self.home_dir / "temp-productivity-report"

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"


def find_config_file(environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Find the YAML config file.

    Search order:
    1. VIBE_REPORT_CONFIG environment variable
    2. <VIBE_REPORT_HOME or ~/.vibe-log>/config.yaml
    """
    environ = os.environ if environ is None else environ
    env_path = environ.get("VIBE_REPORT_CONFIG")
    if env_path:
        return Path(env_path).expanduser()

    home = environ.get("VIBE_REPORT_HOME")
    candidate = (Path(home).expanduser() if home else _default_home()) / "config.yaml"
    return candidate if candidate.exists() else None


def _read_config_file(path: Path) -> dict:
    logger = get_logger()
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except FileNotFoundError:
        logger.warning(f"Config file not found: {path}")
        return {}
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse config file {path}: {e}")
        return {}

    if not isinstance(loaded, dict):
        logger.warning(f"Ignoring config file {path}: expected a mapping")
        return {}
    return loaded


def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from defaults, the YAML file, then the environment."""
    environ = os.environ if environ is None else environ

    data: dict = {}
    path = config_file or find_config_file(environ)
    if path is not None:
        data.update(_read_config_file(path))

    if environ.get("VIBELOG_DEBUG"):
        data["debug"] = True
    if environ.get("VIBE_REPORT_CLAUDE_PATH"):
        data["claude_path"] = environ["VIBE_REPORT_CLAUDE_PATH"]
    if environ.get("VIBE_REPORT_HOME"):
        data["home_dir"] = Path(environ["VIBE_REPORT_HOME"]).expanduser()
    if environ.get("CLAUDE_HOME"):
        data["claude_home"] = Path(environ["CLAUDE_HOME"]).expanduser()

    get_logger().debug(f"Loaded settings from {path or 'defaults'}")
    return Settings(**data)


def get_settings() -> Settings:
    """Get the settings (loaded once per process)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
