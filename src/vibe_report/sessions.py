"""Discovery of Claude Code projects and pre-fetching of their session logs."""

import json
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional

from .executor.logging import get_logger

# Working directories of automated runs; their sessions are not user work.
TEMP_DIRECTORY_NAMES = ("temp-prompt-analysis", "temp-productivity-report", "temp-standup")

TEMP_SESSIONS_DIRNAME = ".vibe-log-temp"


@dataclass
class Project:
    """A Claude Code project folder under ~/.claude/projects."""

    name: str
    claude_path: Path
    actual_path: str
    session_count: int
    last_activity: Optional[datetime] = None
    size: int = 0

    def is_active(self, days: int = 30, now: Optional[datetime] = None) -> bool:
        if self.last_activity is None:
            return False
        now = now or datetime.now()
        return self.last_activity >= now - timedelta(days=days)


@dataclass
class PrefetchResult:
    manifest_path: Path
    copied: int = 0
    total_sessions: int = 0
    skipped_projects: list[str] = field(default_factory=list)


def is_claude_temp_project(folder_name: str) -> bool:
    return any(name in folder_name for name in TEMP_DIRECTORY_NAMES)


def read_session_cwd(session_file: Path) -> Optional[str]:
    """Return the first ``cwd`` recorded in a JSONL session file."""
    try:
        with open(session_file, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if isinstance(data, dict) and data.get("cwd"):
                    return data["cwd"]
    except OSError as e:
        get_logger().debug(f"Could not read session file {session_file}: {e}")
    return None


def analyze_project(claude_dir: Path) -> Optional[Project]:
    """Build a Project from one folder, or None if it holds no sessions."""
    session_files = sorted(claude_dir.glob("*.jsonl"))
    if not session_files:
        return None

    stats = [f.stat() for f in session_files]
    newest = max(stats, key=lambda s: s.st_mtime)

    actual_path = None
    for session_file in session_files:
        actual_path = read_session_cwd(session_file)
        if actual_path:
            break

    return Project(
        name=Path(actual_path).name if actual_path else claude_dir.name,
        claude_path=claude_dir,
        actual_path=actual_path or claude_dir.name,
        session_count=len(session_files),
        last_activity=datetime.fromtimestamp(newest.st_mtime),
        size=sum(s.st_size for s in stats),
    )


def discover_projects(projects_dir: Path) -> list[Project]:
    """All projects with sessions, most recently active first."""
    logger = get_logger()
    if not projects_dir.is_dir():
        logger.debug(f"Projects directory not found: {projects_dir}")
        return []

    projects = []
    for claude_dir in projects_dir.iterdir():
        if not claude_dir.is_dir() or is_claude_temp_project(claude_dir.name):
            continue
        try:
            project = analyze_project(claude_dir)
        except OSError as e:
            logger.debug(f"Error analyzing project {claude_dir.name}: {e}")
            continue
        if project:
            projects.append(project)

    projects.sort(key=lambda p: p.last_activity or datetime.min, reverse=True)
    return projects


def filter_recent(projects: Iterable[Project], days: int, now: Optional[datetime] = None) -> list[Project]:
    return [p for p in projects if p.is_active(days, now)]


def select_projects(projects: Iterable[Project], names: Iterable[str]) -> list[Project]:
    """Projects whose name or folder name matches one of ``names`` (case-insensitive)."""
    wanted = {n.lower() for n in names}
    return [
        p for p in projects
        if p.name.lower() in wanted or p.claude_path.name.lower() in wanted
    ]


def prefetch_sessions(
    projects: Iterable[Project],
    days: int,
    dest: Path,
    large_file_bytes: int = 100_000,
    now: Optional[datetime] = None,
) -> PrefetchResult:
    """Copy recent session files into ``dest`` and describe them in manifest.json.

    ``dest`` is recreated from scratch. Files are prefixed with their Claude
    folder name so sessions from different projects cannot collide.
    """
    logger = get_logger()
    now = now or datetime.now()
    since = now - timedelta(days=days)

    shutil.rmtree(dest, ignore_errors=True)
    dest.mkdir(parents=True, exist_ok=True)

    manifest = {
        "generated": now.isoformat(),
        "timeframe": f"{days}d",
        "timeframeDays": days,
        "projects": [],
        "sessionFiles": [],
    }
    result = PrefetchResult(manifest_path=dest / "manifest.json")

    for project in projects:
        folder = project.claude_path.name
        project_sessions = 0
        try:
            for source in sorted(project.claude_path.glob("*.jsonl")):
                stat = source.stat()
                modified = datetime.fromtimestamp(stat.st_mtime)
                if modified < since:
                    continue
                target_name = f"{folder}_{source.name}"
                shutil.copyfile(source, dest / target_name)
                is_large = stat.st_size > large_file_bytes
                manifest["sessionFiles"].append({
                    "file": target_name,
                    "project": project.name,
                    "originalPath": str(source),
                    "modified": modified.isoformat(),
                    "sizeKB": round(stat.st_size / 1024, 2),
                    "isLarge": is_large,
                    "readStrategy": "read_partial" if is_large else "read_full",
                })
                project_sessions += 1
        except OSError as e:
            logger.warning(f"Could not access project {project.name}: {e}")
            result.skipped_projects.append(project.name)
            continue

        manifest["projects"].append({
            "name": project.name,
            "path": project.actual_path,
            "claudePath": str(project.claude_path),
            "sessionCount": project_sessions,
        })
        result.copied += project_sessions

    result.total_sessions = result.copied
    manifest["totalSessions"] = result.total_sessions
    result.manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    logger.info(f"Pre-fetched {result.copied} session files into {dest}")
    return result
