"""Tests for RC file generation and the supervised shell.

The shell is a throwaway ``/bin/sh`` script, so these run without a terminal.
"""

from __future__ import annotations

import os
import signal
import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

from bashlog.session import (
    LaunchError,
    SessionSetupError,
    build_environment,
    build_session_config,
    launch,
    render_rc,
    write_rc,
)
from bashlog.session.launcher import resolve_shell, session_overrides

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses a /bin/sh script as the shell")


@pytest.fixture
def config(tmp_path: Path):
    return build_session_config(tmp_path / "state", "UTC", "2024-01-01", "12:00:00")


# ---------------------------------------------------------------------------
# RC file
# ---------------------------------------------------------------------------


def test_render_rc(config) -> None:
    text = render_rc(config, generated_at=datetime(2024, 1, 1, 12, 0, 1, tzinfo=UTC))
    log_dir = config.log_dir

    assert text.startswith("# Bashlog RC Configuration\n# Generated at 2024-01-01 12:00:01\n")
    assert 'export BASHLOG_TIMEZONE="UTC"' in text
    assert f'export BASHLOG_LOG_DIR="{log_dir}"' in text
    assert 'export BASHLOG_SESSION_ID="session_2024-01-01_12:00:00"' in text
    assert "export BASHLOG_ENABLED=1" in text
    assert f'export HISTFILE="{log_dir / ".bash_history"}"' in text
    assert "export HISTSIZE=10000" in text
    assert "export HISTFILESIZE=10000" in text
    assert 'PROMPT_COMMAND="history -a; $PROMPT_COMMAND"' in text


def test_write_rc_creates_parent(config) -> None:
    write_rc(config)
    assert config.rc_file.is_file()
    assert config.session_id in config.rc_file.read_text()


def test_write_rc_overwrites(tmp_path: Path) -> None:
    state = tmp_path / "state"
    first = build_session_config(state, "UTC", "2024-01-01", "12:00:00")
    second = build_session_config(state, "UTC", "2024-01-02", "08:00:00")
    assert first.rc_file == second.rc_file

    write_rc(first)
    write_rc(second)

    text = second.rc_file.read_text()
    assert second.session_id in text
    assert first.session_id not in text
    assert text.count("BASHLOG_SESSION_ID") == 1


def test_write_rc_failure(config) -> None:
    config.rc_file.mkdir(parents=True)  # a directory where the file should go
    with pytest.raises(SessionSetupError):
        write_rc(config)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def test_build_environment_is_base_plus_overrides(config) -> None:
    base = {"HOME": "/home/me", "BASHLOG_TIMEZONE": "Europe/Paris"}
    env = build_environment(config, base)

    assert env == {
        "HOME": "/home/me",
        "BASHLOG_SESSION_ID": "session_2024-01-01_12:00:00",
        "BASHLOG_LOG_FILE": str(config.log_dir / "session_12:00:00.log"),
        "BASHLOG_TIMEZONE": "UTC",
    }
    # The base mapping is never mutated.
    assert base == {"HOME": "/home/me", "BASHLOG_TIMEZONE": "Europe/Paris"}


def test_session_overrides_keys(config) -> None:
    assert set(session_overrides(config)) == {"BASHLOG_SESSION_ID", "BASHLOG_LOG_FILE", "BASHLOG_TIMEZONE"}


def test_resolve_shell() -> None:
    assert resolve_shell({"SHELL": "/usr/bin/zsh"}) == "/usr/bin/zsh"
    assert resolve_shell({}) == "/bin/bash"
    assert resolve_shell({"SHELL": ""}) == "/bin/bash"
    assert resolve_shell({}, default="/bin/sh") == "/bin/sh"


# ---------------------------------------------------------------------------
# Launch
# ---------------------------------------------------------------------------


@posix_only
def test_launch_runs_interactive_shell_with_session_env(config, shell_env: dict[str, str]) -> None:
    status = launch(config, base_env={**shell_env, "EXTRA": "inherited"})
    assert status == 0

    lines = Path(shell_env["OUT"]).read_text().splitlines()
    assert lines == [
        "-i",
        "session_2024-01-01_12:00:00",
        str(config.log_dir / "session_12:00:00.log"),
        "UTC",
        "inherited",
    ]


@posix_only
def test_launch_propagates_exit_status(config, shell_env: dict[str, str]) -> None:
    assert launch(config, base_env={**shell_env, "EXIT_CODE": "3"}) == 3


@posix_only
def test_launch_uses_default_shell_when_unset(config, shell_env: dict[str, str], fake_shell: Path) -> None:
    env = {k: v for k, v in shell_env.items() if k != "SHELL"}
    assert launch(config, base_env=env, default_shell=str(fake_shell)) == 0
    assert Path(shell_env["OUT"]).exists()


def test_launch_missing_shell(config, tmp_path: Path) -> None:
    with pytest.raises(LaunchError):
        launch(config, base_env={"SHELL": str(tmp_path / "no-such-shell")})


@posix_only
def test_launch_killed_by_signal(config, tmp_path: Path) -> None:
    script = tmp_path / "suicidal-shell"
    script.write_text("#!/bin/sh\nkill -9 $$\n")
    script.chmod(0o755)
    with pytest.raises(LaunchError):
        launch(config, base_env={"SHELL": str(script), "PATH": os.environ.get("PATH", "/usr/bin:/bin")})


@posix_only
def test_launch_restores_sigint_handler(config, shell_env: dict[str, str]) -> None:
    before = signal.getsignal(signal.SIGINT)
    launch(config, base_env=shell_env)
    assert signal.getsignal(signal.SIGINT) is before


@posix_only
def test_rc_file_is_world_readable(config) -> None:
    write_rc(config)
    assert config.rc_file.stat().st_mode & 0o777 == 0o644
