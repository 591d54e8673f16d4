"""Shared fixtures.

Every test gets its own state roots under ``tmp_path`` through ``BASHLOG_*``
env vars, so nothing ever touches the real ``~/.bashlog*`` directories.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from bashlog.settings import _get_settings_cached
from bashlog.workspaces import LocalWorkspaceStore


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point both state roots at ``tmp_path`` and invalidate the settings cache."""
    monkeypatch.setenv("BASHLOG_WORKSPACES_ROOT", str(tmp_path / "workspaces"))
    monkeypatch.setenv("BASHLOG_STATE_ROOT", str(tmp_path / "state"))
    monkeypatch.setenv("BASHLOG_LOG_LEVEL", "WARNING")
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()
    # CLI tests point loguru at CliRunner's temporary stderr.
    logger.remove()


@pytest.fixture
def store(tmp_path: Path) -> LocalWorkspaceStore:
    return LocalWorkspaceStore(tmp_path / "workspaces")


@pytest.fixture
def fake_shell(tmp_path: Path) -> Path:
    """Executable stand-in for the user's shell.

    Records its first argument and the session variables into ``$OUT``, then
    exits with ``$EXIT_CODE`` (default 0).
    """
    script = tmp_path / "fake-shell"
    script.write_text(
        "#!/bin/sh\n"
        'printf \'%s\\n\' "$1" "$BASHLOG_SESSION_ID" "$BASHLOG_LOG_FILE" "$BASHLOG_TIMEZONE" "$EXTRA" > "$OUT"\n'
        'exit "${EXIT_CODE:-0}"\n'
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def shell_env(tmp_path: Path, fake_shell: Path) -> dict[str, str]:
    """Minimal base environment that makes ``launch`` run ``fake_shell``."""
    return {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "SHELL": str(fake_shell),
        "OUT": str(tmp_path / "shell.out"),
    }
