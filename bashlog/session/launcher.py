"""RC file generation and the supervised child shell.

The launcher writes the shared RC file for the session, then runs exactly one
interactive shell with the parent's stdio and an environment made of the
parent's variables plus the session overrides.  It blocks until the shell
exits and hands back its exit status.  There is no retry and no timeout.
"""

from __future__ import annotations

import os
import signal
import subprocess
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime

from loguru import logger

from bashlog.errors import BashlogError
from bashlog.fs import atomic_write
from bashlog.session.config import SessionConfig, SessionSetupError

DEFAULT_SHELL = "/bin/bash"
HISTORY_SIZE = 10000

_RC_TEMPLATE = """\
# Bashlog RC Configuration
# Generated at {generated_at}

# Timezone setting
export BASHLOG_TIMEZONE="{timezone}"

# Logging directory
export BASHLOG_LOG_DIR="{log_dir}"

# Session ID
export BASHLOG_SESSION_ID="{session_id}"

# Enable logging
export BASHLOG_ENABLED=1

# Log history
export HISTFILE="{histfile}"
export HISTSIZE={history_size}
export HISTFILESIZE={history_size}

# Log command execution
PROMPT_COMMAND="history -a; $PROMPT_COMMAND"
"""


class LaunchError(BashlogError, RuntimeError):
    """Raised when the shell cannot be started or dies abnormally."""


def render_rc(config: SessionConfig, *, generated_at: datetime | None = None) -> str:
    generated_at = generated_at or datetime.now(tz=UTC)
    return _RC_TEMPLATE.format(
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S"),
        timezone=config.timezone,
        log_dir=config.log_dir,
        session_id=config.session_id,
        histfile=config.log_dir / ".bash_history",
        history_size=HISTORY_SIZE,
    )


def write_rc(config: SessionConfig) -> None:
    """Overwrite the shared RC file with this session's settings.

    Only the most recent session's RC state is kept.
    """
    try:
        atomic_write(config.rc_file, render_rc(config))
    except OSError as exc:
        msg = f"failed to write RC file {config.rc_file}: {exc}"
        raise SessionSetupError(msg) from exc
    logger.info("RC file created at: {}", config.rc_file)


def session_overrides(config: SessionConfig) -> dict[str, str]:
    return {
        "BASHLOG_SESSION_ID": config.session_id,
        "BASHLOG_LOG_FILE": str(config.log_file),
        "BASHLOG_TIMEZONE": config.timezone,
    }


def build_environment(config: SessionConfig, base: Mapping[str, str]) -> dict[str, str]:
    """Return ``base`` plus the session overrides as a new mapping."""
    return {**base, **session_overrides(config)}


def resolve_shell(env: Mapping[str, str], default: str = DEFAULT_SHELL) -> str:
    return env.get("SHELL") or default


def launch(
    config: SessionConfig,
    *,
    base_env: Mapping[str, str] | None = None,
    default_shell: str = DEFAULT_SHELL,
) -> int:
    """Run ``<shell> -i`` attached to the current terminal and wait for it.

    Returns the shell's exit status.  Raises ``LaunchError`` if the shell
    cannot be started or is killed by a signal.
    """
    base_env = os.environ if base_env is None else base_env
    shell = resolve_shell(base_env, default_shell)
    env = build_environment(config, base_env)

    logger.info("Starting shell: {}", shell)
    logger.info("Logging to: {}", config.log_file)

    try:
        proc = subprocess.Popen([shell, "-i"], env=env)  # noqa: S603
    except OSError as exc:
        msg = f"failed to start shell {shell}: {exc}"
        raise LaunchError(msg) from exc

    with _sigint_ignored():
        returncode = proc.wait()

    if returncode < 0:
        msg = f"shell {shell} terminated by signal {-returncode}"
        raise LaunchError(msg)

    logger.debug("Shell exited with status {}", returncode)
    return returncode


@contextmanager
def _sigint_ignored() -> Iterator[None]:
    """Ignore Ctrl-C in the waiting parent; it belongs to the interactive shell.

    Installed only after the child was spawned, so the child does not inherit it.
    """
    try:
        previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    except ValueError:
        # Not the main thread.
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)
