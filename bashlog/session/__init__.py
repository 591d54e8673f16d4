"""Session setup and the instrumented shell launcher."""

from bashlog.session.config import (
    InvalidTimezoneError,
    SessionConfig,
    SessionSetupError,
    build_session_config,
)
from bashlog.session.launcher import LaunchError, build_environment, launch, render_rc, write_rc

__all__ = [
    "InvalidTimezoneError",
    "LaunchError",
    "SessionConfig",
    "SessionSetupError",
    "build_environment",
    "build_session_config",
    "launch",
    "render_rc",
    "write_rc",
]
