"""Pytest fixtures for vibe-report tests."""

import io
import json
import os
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from vibe_report import config
from vibe_report.config import Settings
from vibe_report.executor import logging
from vibe_report.ui import make_console


@pytest.fixture
def reset_settings_singleton():
    """Reset the _settings singleton between tests.

    Saves the current config._settings (may be None), clears it before
    the test and restores the original afterwards.
    """
    original_value = config._settings
    config._settings = None
    yield
    config._settings = original_value


@pytest.fixture
def reset_logger_singleton():
    """Reset the _logger singleton between tests."""
    original_value = logging._logger
    logging._logger = None
    yield
    logging._logger = original_value


@pytest.fixture
def output():
    """In-memory file that a test console writes to."""
    return io.StringIO()


@pytest.fixture
def capture_console(output):
    """Colourless console writing into ``output``."""
    return make_console(output)


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in tmp_path instead of the real home directory."""
    return Settings(
        home_dir=tmp_path / "vibe-log",
        claude_home=tmp_path / "claude",
    )


def write_session(project_dir, name, cwd, age_days=0.0, lines=3):
    """Create a JSONL session file whose mtime is ``age_days`` in the past."""
    project_dir.mkdir(parents=True, exist_ok=True)
    path = project_dir / name
    entries = [{"type": "user", "cwd": cwd, "message": {"content": f"line {i}"}} for i in range(lines)]
    path.write_text("\n".join(json.dumps(e) for e in entries) + "\n", encoding="utf-8")
    mtime = (datetime.now() - timedelta(days=age_days)).timestamp()
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def session_store(settings):
    """A Claude projects directory with two recent projects and one stale one."""
    projects = settings.projects_dir
    write_session(projects / "-home-dev-alpha", "s1.jsonl", "/home/dev/alpha", age_days=0.5)
    write_session(projects / "-home-dev-alpha", "s2.jsonl", "/home/dev/alpha", age_days=2)
    write_session(projects / "-home-dev-beta", "s1.jsonl", "/home/dev/beta", age_days=1.5)
    write_session(projects / "-home-dev-gamma", "old.jsonl", "/home/dev/gamma", age_days=40)
    write_session(projects / "-home-dev-temp-productivity-report", "x.jsonl", "/tmp/x", age_days=0.1)
    return projects


class FakeStream:
    """Stands in for a subprocess pipe: ``read`` returns each chunk, then b''."""

    def __init__(self, chunks=()):
        self._chunks = [c.encode("utf-8") if isinstance(c, str) else c for c in chunks]

    async def read(self, n=-1):
        if self._chunks:
            return self._chunks.pop(0)
        return b""


@pytest.fixture
def make_process():
    """Factory for a mocked asyncio subprocess."""
    def factory(stdout_chunks=(), stderr_chunks=(), returncode=0, pid=4242):
        process = MagicMock()
        process.pid = pid
        process.returncode = returncode
        process.stdout = FakeStream(stdout_chunks)
        process.stderr = FakeStream(stderr_chunks)
        process.wait = AsyncMock(return_value=returncode)
        return process
    return factory


def ndjson(*events):
    """Encode events as one NDJSON string."""
    return "".join(json.dumps(e) + "\n" for e in events)
