"""Workspace data models.

A workspace is a named directory holding a ``config.txt`` record and an
append-only ``history.log``.  The models here are built from those files by
the registry; they are never written back.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, Field

T = TypeVar("T")

ZERO_TIME = datetime.min.replace(tzinfo=UTC)
"""Creation time assigned to workspaces whose ``created`` field is unusable."""


# -- Parsing -----------------------------------------------------------------


def parse_or_default(parse: Callable[[str], T], raw: str | None, default: T) -> T:
    """Apply ``parse`` to ``raw``, returning ``default`` when it is missing or invalid.

    Persisted fields are best-effort: a corrupt record must never take down a
    whole listing, so bad values degrade to a default instead of raising.
    """
    if raw is None:
        return default
    try:
        return parse(raw)
    except ValueError:
        logger.debug("Unparseable config value {!r}, using default {!r}", raw, default)
        return default


def parse_timestamp(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp.  Naive values are taken as UTC."""
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def parse_count(raw: str) -> int:
    """Parse a non-negative command counter."""
    value = int(raw)
    if value < 0:
        msg = f"negative command count: {value}"
        raise ValueError(msg)
    return value


def format_timestamp(value: datetime) -> str:
    """Render the wire format used for the ``created`` field."""
    return value.isoformat(timespec="seconds")


# -- Workspace ---------------------------------------------------------------


class Workspace(BaseModel):
    """A workspace as seen through its directory and config record."""

    name: str
    created_at: datetime = ZERO_TIME
    path: Path
    command_count: int = 0

    @classmethod
    def from_record(cls, name: str, path: Path, record: Mapping[str, str]) -> Workspace:
        return cls(
            name=name,
            path=path,
            created_at=parse_or_default(parse_timestamp, record.get("created"), ZERO_TIME),
            command_count=parse_or_default(parse_count, record.get("commands"), 0),
        )


class WorkspaceDetail(BaseModel):
    """A workspace together with its raw config and most recent history."""

    workspace: Workspace
    config: dict[str, str] = Field(default_factory=dict)
    recent_history: list[str] = Field(default_factory=list, description="Oldest first")


class WorkspaceStats(BaseModel):
    """Aggregate figures across every workspace in a store."""

    total_workspaces: int
    total_commands: int
    average_commands: float
    oldest: Workspace
    newest: Workspace
