"""Workspace registry: directory-backed workspaces with a config record and a history log."""

from bashlog.workspaces.models import Workspace, WorkspaceDetail, WorkspaceStats
from bashlog.workspaces.registry import (
    InvalidWorkspaceNameError,
    NoHistoryError,
    NoWorkspacesError,
    create_workspace,
    delete_workspace,
    is_valid_name,
    list_workspaces,
    require_workspace,
    view_workspace,
    workspace_history,
    workspace_stats,
)
from bashlog.workspaces.store import (
    LocalWorkspaceStore,
    StorageError,
    WorkspaceExistsError,
    WorkspaceNotFoundError,
)

__all__ = [
    "InvalidWorkspaceNameError",
    "LocalWorkspaceStore",
    "NoHistoryError",
    "NoWorkspacesError",
    "StorageError",
    "Workspace",
    "WorkspaceDetail",
    "WorkspaceExistsError",
    "WorkspaceNotFoundError",
    "WorkspaceStats",
    "create_workspace",
    "delete_workspace",
    "is_valid_name",
    "list_workspaces",
    "require_workspace",
    "view_workspace",
    "workspace_history",
    "workspace_stats",
]
