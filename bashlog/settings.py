"""Configuration loaded from BASHLOG_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class BashlogSettings(BaseSettings):
    """Bashlog settings.

    All fields are read from environment variables with the ``BASHLOG_`` prefix.
    For example, ``BASHLOG_LOG_LEVEL=DEBUG`` maps to ``log_level``.

    The launcher exports its own ``BASHLOG_*`` variables into every child shell
    (``BASHLOG_SESSION_ID``, ``BASHLOG_TIMEZONE``, ...).  Those are not settings
    and are ignored here, so a nested ``bashlog`` invocation still parses.
    """

    model_config = SettingsConfigDict(
        env_prefix="BASHLOG_",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- State roots -----------------------------------------------------------
    workspaces_root: Path = Path("~/.bashlog-workspaces")
    """Directory holding one sub-directory per workspace."""

    state_root: Path = Path("~/.bashlog")
    """Directory holding the shared RC file and the per-date session logs."""

    # -- Session defaults ------------------------------------------------------
    default_timezone: str = "UTC"
    default_shell: str = "/bin/bash"
    """Shell used when ``$SHELL`` is unset or empty."""

    # -- Helpers ---------------------------------------------------------------

    def resolved_workspaces_root(self) -> Path:
        return self.workspaces_root.expanduser()

    def resolved_state_root(self) -> Path:
        return self.state_root.expanduser()


def get_settings() -> BashlogSettings:
    """Return a cached settings instance.

    Reads from environment variables on first call, then returns the same
    object.  Call ``_get_settings_cached.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


@lru_cache(maxsize=1)
def _get_settings_cached() -> BashlogSettings:
    return BashlogSettings()
