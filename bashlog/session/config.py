"""Session identity and on-disk locations.

A session is one launch of an instrumented shell.  Its identity is fully
determined by (timezone, date, time); the log directory is per date and the
RC file is a single shared path overwritten on every launch::

    {state_root}/logs/{date}/        per-date log directory
    {state_root}/bashlog.rc          RC file of the most recent session
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel

from bashlog.errors import BashlogError

DEFAULT_TIMEZONE = "UTC"
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
RC_FILENAME = "bashlog.rc"


class InvalidTimezoneError(BashlogError, ValueError):
    """Raised when a timezone name cannot be resolved."""


class SessionSetupError(BashlogError, OSError):
    """Raised when the session log directory cannot be created."""


class SessionConfig(BaseModel):
    timezone: str
    date: str
    time: str
    session_id: str
    log_dir: Path
    rc_file: Path

    @property
    def log_file(self) -> Path:
        """Per-session log file inside the date directory."""
        return self.log_dir / f"session_{self.time}.log"


def session_id_for(date: str, time: str) -> str:
    return f"session_{date}_{time}"


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"invalid timezone: {name!r}"
        raise InvalidTimezoneError(msg) from exc


def build_session_config(
    state_root: Path,
    timezone: str | None = None,
    date: str | None = None,
    time: str | None = None,
    *,
    now: datetime | None = None,
) -> SessionConfig:
    """Resolve defaults, derive the session id and create the log directory.

    ``date`` and ``time`` are taken verbatim when given; only missing ones are
    filled from the current moment in the resolved timezone.  The timezone is
    always validated.

    Raises ``InvalidTimezoneError`` or ``SessionSetupError``.
    """
    timezone = timezone or DEFAULT_TIMEZONE
    tz = resolve_timezone(timezone)

    if not date or not time:
        local_now = (now or datetime.now(tz=tz)).astimezone(tz)
        date = date or local_now.strftime(DATE_FORMAT)
        time = time or local_now.strftime(TIME_FORMAT)

    log_dir = state_root / "logs" / date
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"failed to create log directory {log_dir}: {exc}"
        raise SessionSetupError(msg) from exc

    return SessionConfig(
        timezone=timezone,
        date=date,
        time=time,
        session_id=session_id_for(date, time),
        log_dir=log_dir,
        rc_file=state_root / RC_FILENAME,
    )
