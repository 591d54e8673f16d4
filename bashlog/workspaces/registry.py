"""Workspace registry operations.

Validates names and answers registry-level queries (list, view, stats,
history) on top of a ``LocalWorkspaceStore``.  Functions raise domain
exceptions, never print or exit -- that translation is the CLI's
responsibility.
"""

from __future__ import annotations

import re

from loguru import logger

from bashlog.errors import BashlogError
from bashlog.workspaces.models import Workspace, WorkspaceDetail, WorkspaceStats
from bashlog.workspaces.store import LocalWorkspaceStore, WorkspaceNotFoundError

MAX_NAME_LENGTH = 255
RECENT_HISTORY_LINES = 5
DEFAULT_HISTORY_LINES = 20

_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")


class InvalidWorkspaceNameError(BashlogError, ValueError):
    """Raised when a workspace name fails ``is_valid_name``."""


class NoWorkspacesError(BashlogError, LookupError):
    """Raised when an aggregate is requested over an empty store."""


class NoHistoryError(BashlogError, LookupError):
    """Raised when a workspace has no history entries at all."""


def is_valid_name(name: str) -> bool:
    """1-255 characters, ASCII letters, digits, hyphen and underscore only."""
    return 0 < len(name) <= MAX_NAME_LENGTH and _NAME_RE.fullmatch(name) is not None


def require_workspace(store: LocalWorkspaceStore, name: str) -> None:
    """Raise ``WorkspaceNotFoundError`` unless ``name`` is a valid, existing workspace.

    Names outside the allowed set (``.``, ``..``, ``../x``) never match a workspace,
    so they cannot resolve to the store root or anything outside it.
    """
    if not is_valid_name(name) or not store.exists(name):
        raise WorkspaceNotFoundError(name)


def load_workspace(store: LocalWorkspaceStore, name: str) -> Workspace:
    """Build a ``Workspace`` from its config record, defaulting bad fields."""
    return Workspace.from_record(name, store.workspace_dir(name), store.read_config(name))


def create_workspace(store: LocalWorkspaceStore, name: str) -> Workspace:
    """Create a new workspace.

    Raises ``InvalidWorkspaceNameError`` before touching the filesystem,
    ``WorkspaceExistsError`` if the name is taken.
    """
    if not is_valid_name(name):
        raise InvalidWorkspaceNameError(name)
    store.create(name)
    logger.debug("Registry: created workspace {}", name)
    return load_workspace(store, name)


def delete_workspace(store: LocalWorkspaceStore, name: str) -> None:
    """Delete a workspace.  Raises ``WorkspaceNotFoundError`` if missing."""
    require_workspace(store, name)
    store.delete(name)
    logger.debug("Registry: deleted workspace {}", name)


def list_workspaces(store: LocalWorkspaceStore) -> list[Workspace]:
    """List all workspaces, newest first.

    Ties keep store enumeration order (the sort is stable).
    """
    workspaces = [load_workspace(store, name) for name in store.list_names()]
    workspaces.sort(key=lambda ws: ws.created_at, reverse=True)
    return workspaces


def view_workspace(store: LocalWorkspaceStore, name: str) -> WorkspaceDetail:
    """Return a workspace with its raw config and last few non-empty history lines."""
    require_workspace(store, name)
    config = store.read_config(name)
    lines = [line for line in store.read_history(name, missing_ok=True) if line]
    return WorkspaceDetail(
        workspace=Workspace.from_record(name, store.workspace_dir(name), config),
        config=config,
        recent_history=lines[-RECENT_HISTORY_LINES:],
    )


def workspace_stats(store: LocalWorkspaceStore) -> WorkspaceStats:
    """Aggregate command counts and creation times across all workspaces.

    Raises ``NoWorkspacesError`` when the store is empty.
    """
    workspaces = list_workspaces(store)
    if not workspaces:
        raise NoWorkspacesError(str(store.root))

    total_commands = 0
    oldest = newest = workspaces[0]
    for ws in workspaces:
        total_commands += ws.command_count
        if ws.created_at < oldest.created_at:
            oldest = ws
        if ws.created_at > newest.created_at:
            newest = ws

    return WorkspaceStats(
        total_workspaces=len(workspaces),
        total_commands=total_commands,
        average_commands=total_commands / len(workspaces),
        oldest=oldest,
        newest=newest,
    )


def workspace_history(store: LocalWorkspaceStore, name: str, n: int = DEFAULT_HISTORY_LINES) -> list[str]:
    """Return the last ``n`` non-empty history lines, oldest first.

    Raises ``WorkspaceNotFoundError`` if the workspace is missing and
    ``NoHistoryError`` if it has never logged anything.
    """
    if n < 1:
        msg = f"history length must be positive, got {n}"
        raise ValueError(msg)
    require_workspace(store, name)
    lines = [line for line in store.read_history(name) if line]
    if not lines:
        raise NoHistoryError(name)
    return lines[-n:]
