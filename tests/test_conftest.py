"""Tests for pytest fixtures in conftest.py."""

import asyncio

from vibe_report import config
from vibe_report.executor import logging


class TestResetSettingsSingleton:
    """Tests for reset_settings_singleton fixture."""

    def test_reset_settings_singleton(self, reset_settings_singleton):
        """_settings is cleared before the test."""
        assert config._settings is None

        config._settings = config.Settings()

        assert config._settings is not None


class TestResetLoggerSingleton:
    """Tests for reset_logger_singleton fixture."""

    def test_reset_logger_singleton(self, reset_logger_singleton):
        """_logger is cleared before the test."""
        assert logging._logger is None


class TestFakeProcess:
    """Tests for the make_process fixture."""

    async def _drain(self, stream):
        chunks = []
        while True:
            chunk = await stream.read(1024)
            if not chunk:
                return chunks
            chunks.append(chunk)

    def test_settings_fixture(self, settings, tmp_path):
        """Settings never point at the real home directory."""
        assert settings.claude_home == tmp_path / "claude"
        assert settings.home_dir == tmp_path / "vibe-log"

    def test_streams(self, make_process):

        process = make_process(["a", b"b"], returncode=3)

        assert asyncio.run(self._drain(process.stdout)) == [b"a", b"b"]
        assert asyncio.run(self._drain(process.stderr)) == []
        assert asyncio.run(process.wait()) == 3
