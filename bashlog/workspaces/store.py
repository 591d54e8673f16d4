"""Local filesystem workspace store.

Each workspace is a directory directly under the store root::

    {root}/{name}/config.txt     key=value record (name, created, commands)
    {root}/{name}/history.log    newline-delimited history, append-only

The directory *is* the workspace: it exists if and only if the directory
exists.  The store performs no name validation; that is the registry's job.

Config records are written atomically (temp file + rename), and the workspace
directory is created with an exclusive ``mkdir``, so two concurrent creators
of the same name cannot both succeed.
"""

from __future__ import annotations

import contextlib
from datetime import datetime
from pathlib import Path

from loguru import logger

from bashlog.errors import BashlogError
from bashlog.fs import atomic_write, remove_tree
from bashlog.workspaces import codec
from bashlog.workspaces.models import format_timestamp

CONFIG_FILE = "config.txt"
HISTORY_FILE = "history.log"


class WorkspaceExistsError(BashlogError, FileExistsError):
    """Raised when a workspace with the given name already exists."""


class WorkspaceNotFoundError(BashlogError, LookupError):
    """Raised when a workspace is not found."""


class StorageError(BashlogError, OSError):
    """Raised when a workspace file or directory cannot be created, read or removed."""


class LocalWorkspaceStore:
    """Directory-per-workspace store rooted at ``root``.

    The root does not have to exist yet: an uninitialised store simply holds
    zero workspaces, and ``create`` makes the root on first use.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def workspace_dir(self, name: str) -> Path:
        return self._root / name

    # -- Query -----------------------------------------------------------------

    def exists(self, name: str) -> bool:
        return self.workspace_dir(name).is_dir()

    def list_names(self) -> list[str]:
        """Return the names of all workspace directories, sorted by name."""
        try:
            entries = list(self._root.iterdir())
        except FileNotFoundError:
            return []
        except OSError as exc:
            msg = f"failed to read workspaces in {self._root}: {exc}"
            raise StorageError(msg) from exc
        return sorted(entry.name for entry in entries if entry.is_dir())

    def read_config(self, name: str) -> dict[str, str]:
        """Decode the workspace's config record.  Missing config reads as ``{}``."""
        return codec.read_record(self.workspace_dir(name) / CONFIG_FILE)

    def read_history(self, name: str, *, missing_ok: bool = False) -> list[str]:
        """Return every history line, oldest first.

        Lines are opaque text from an external logger: undecodable bytes are
        replaced, never fatal.  A trailing newline does not produce an extra
        empty entry.  A missing history file raises ``StorageError`` unless ``missing_ok`` is set.
        """
        path = self.workspace_dir(name) / HISTORY_FILE
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError as exc:
            if missing_ok:
                return []
            msg = f"failed to read history for '{name}': {exc}"
            raise StorageError(msg) from exc
        except OSError as exc:
            msg = f"failed to read history for '{name}': {exc}"
            raise StorageError(msg) from exc

        if not text:
            return []
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return lines

    # -- Mutation --------------------------------------------------------------

    def create(self, name: str, *, created_at: datetime | None = None) -> Path:
        """Create the workspace directory, its config record and an empty history.

        Raises ``WorkspaceExistsError`` if the directory already exists, and
        ``StorageError`` if anything cannot be written.  A failure after the
        directory was made removes it again, so the name can be retried.
        """
        ws_dir = self.workspace_dir(name)
        if ws_dir.exists():
            raise WorkspaceExistsError(name)

        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"failed to create workspace root {self._root}: {exc}"
            raise StorageError(msg) from exc

        try:
            ws_dir.mkdir()
        except FileExistsError:
            # Lost a race against a concurrent creator.
            raise WorkspaceExistsError(name) from None
        except OSError as exc:
            msg = f"failed to create workspace directory {ws_dir}: {exc}"
            raise StorageError(msg) from exc

        created_at = created_at or datetime.now().astimezone()
        record = {"name": name, "created": format_timestamp(created_at), "commands": "0"}
        try:
            atomic_write(ws_dir / CONFIG_FILE, codec.encode(record))
            (ws_dir / HISTORY_FILE).write_text("", encoding="utf-8")
        except OSError as exc:
            with contextlib.suppress(OSError):
                remove_tree(ws_dir)
            msg = f"failed to initialise workspace '{name}': {exc}"
            raise StorageError(msg) from exc

        logger.debug("Store: created workspace {} at {}", name, ws_dir)
        return ws_dir

    def delete(self, name: str) -> None:
        """Remove the workspace directory and everything in it.

        Irreversible.  Confirmation is the caller's responsibility.
        """
        ws_dir = self.workspace_dir(name)
        if not ws_dir.is_dir():
            raise WorkspaceNotFoundError(name)
        try:
            remove_tree(ws_dir)
        except OSError as exc:
            msg = f"failed to delete workspace '{name}': {exc}"
            raise StorageError(msg) from exc
        logger.debug("Store: deleted workspace {}", name)

    def append_history(self, name: str, line: str) -> None:
        """Append one entry to the workspace's history log."""
        if not self.exists(name):
            raise WorkspaceNotFoundError(name)
        path = self.workspace_dir(name) / HISTORY_FILE
        try:
            with path.open("a", encoding="utf-8") as f:
                f.write(f"{line}\n")
        except OSError as exc:
            msg = f"failed to append history for '{name}': {exc}"
            raise StorageError(msg) from exc
