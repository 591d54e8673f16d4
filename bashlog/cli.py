from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from bashlog.errors import BashlogError

if TYPE_CHECKING:
    from bashlog.session import SessionConfig
    from bashlog.workspaces import LocalWorkspaceStore

# ---------------------------------------------------------------------------
# Shared plumbing
# ---------------------------------------------------------------------------


class _ManagerGroup(click.Group):
    """Command group whose usage errors exit with status 1 instead of click's 2."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        # Bad group options (`bashlog-mgr --bogus`).
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise

    def invoke(self, ctx: click.Context) -> Any:
        # Unknown subcommands and bad subcommand arguments.
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Turn domain errors into a single ``Error: ...`` line and exit status 1."""
    from bashlog.workspaces import InvalidWorkspaceNameError, WorkspaceExistsError, WorkspaceNotFoundError

    try:
        yield
    except InvalidWorkspaceNameError as exc:
        msg = (
            f"invalid workspace name '{exc}' "
            "(names must contain only alphanumeric characters, hyphens, and underscores)"
        )
        raise click.ClickException(msg) from exc
    except WorkspaceExistsError as exc:
        raise click.ClickException(f"workspace '{exc}' already exists") from exc
    except WorkspaceNotFoundError as exc:
        raise click.ClickException(f"workspace '{exc}' not found") from exc
    except BashlogError as exc:
        raise click.ClickException(str(exc)) from exc


def _setup(log_level: str) -> None:
    from bashlog.log import setup_logging

    setup_logging(log_level)


# ---------------------------------------------------------------------------
# bashlog-mgr: workspace registry
# ---------------------------------------------------------------------------

MANAGER_EPILOG = """\b
Examples:
  bashlog-mgr list
  bashlog-mgr create my-project
  bashlog-mgr delete old-workspace
  bashlog-mgr view my-project
  bashlog-mgr stats
  bashlog-mgr history my-project 50

\b
Workspaces are stored in: ~/.bashlog-workspaces/ (override with BASHLOG_WORKSPACES_ROOT)
"""


@click.group("bashlog-mgr", cls=_ManagerGroup, invoke_without_command=True, epilog=MANAGER_EPILOG)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: from BASHLOG_WORKSPACES_ROOT or ~/.bashlog-workspaces).",
)
@click.pass_context
def manager(ctx: click.Context, root: Path | None) -> None:
    """bashlog-mgr - Bash Command Logging Workspace Manager."""
    from bashlog.settings import get_settings
    from bashlog.workspaces import LocalWorkspaceStore

    settings = get_settings()
    _setup(settings.log_level)
    ctx.obj = LocalWorkspaceStore(root.expanduser() if root else settings.resolved_workspaces_root())

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)


@manager.command("list")
@click.pass_obj
def list_command(store: LocalWorkspaceStore) -> None:
    """List all workspaces with statistics."""
    from bashlog.workspaces import list_workspaces

    with _translate_errors():
        workspaces = list_workspaces(store)

    if not workspaces:
        click.echo("No workspaces found. Create one with: bashlog-mgr create <name>")
        return

    click.echo(f"{'NAME':<20} {'CREATED':<19} {'COMMANDS':<10} PATH")
    click.echo("-" * 70)
    for ws in workspaces:
        created = ws.created_at.strftime("%Y-%m-%d %H:%M:%S")
        click.echo(f"{ws.name:<20} {created:<19} {ws.command_count:<10} {ws.path}")


@manager.command()
@click.argument("name")
@click.pass_obj
def create(store: LocalWorkspaceStore, name: str) -> None:
    """Create a new workspace."""
    from bashlog.workspaces import create_workspace

    with _translate_errors():
        ws = create_workspace(store, name)
    click.echo(f"✓ Workspace '{ws.name}' created successfully at {ws.path}")


@manager.command()
@click.argument("name")
@click.option("--yes", "-y", "assume_yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
@click.pass_obj
def delete(store: LocalWorkspaceStore, name: str, assume_yes: bool) -> None:
    """Delete a workspace (with confirmation)."""
    from bashlog.workspaces import delete_workspace, require_workspace

    with _translate_errors():
        require_workspace(store, name)

        if not assume_yes:
            try:
                answer = click.prompt(
                    f"Are you sure you want to delete workspace '{name}'? (yes/no)",
                    default="",
                    show_default=False,
                )
            except click.Abort:
                answer = ""
            if answer.strip().lower() not in ("yes", "y"):
                click.echo("Deletion cancelled")
                return

        delete_workspace(store, name)
    click.echo(f"✓ Workspace '{name}' deleted successfully")


@manager.command()
@click.argument("name")
@click.pass_obj
def view(store: LocalWorkspaceStore, name: str) -> None:
    """View detailed information about a workspace."""
    from bashlog.workspaces import view_workspace

    with _translate_errors():
        detail = view_workspace(store, name)

    click.echo(f"\n=== Workspace: {name} ===")
    click.echo(f"Path: {detail.workspace.path}")
    click.echo(f"Created: {detail.config.get('created', '')}")
    click.echo(f"Commands Logged: {detail.workspace.command_count}")
    if detail.recent_history:
        click.echo("\nRecent Commands (last 5):")
        for line in detail.recent_history:
            click.echo(f"  {line}")
    click.echo()


@manager.command()
@click.pass_obj
def stats(store: LocalWorkspaceStore) -> None:
    """Display overall statistics across all workspaces."""
    from bashlog.workspaces import NoWorkspacesError, workspace_stats

    with _translate_errors():
        try:
            result = workspace_stats(store)
        except NoWorkspacesError:
            click.echo("No workspaces found")
            return

    click.echo("\n=== Workspace Statistics ===")
    click.echo(f"Total Workspaces: {result.total_workspaces}")
    click.echo(f"Total Commands Logged: {result.total_commands}")
    click.echo(f"Average Commands per Workspace: {result.average_commands:.2f}")
    click.echo(f"Oldest Workspace: {result.oldest.name} (created {result.oldest.created_at:%Y-%m-%d})")
    click.echo(f"Newest Workspace: {result.newest.name} (created {result.newest.created_at:%Y-%m-%d})")
    click.echo()


@manager.command()
@click.argument("name")
@click.argument("lines", required=False, default=20, type=click.IntRange(min=1))
@click.pass_obj
def history(store: LocalWorkspaceStore, name: str, lines: int) -> None:
    """Show command history for a workspace (default: last 20 lines)."""
    from bashlog.workspaces import NoHistoryError, workspace_history

    with _translate_errors():
        try:
            entries = workspace_history(store, name, lines)
        except NoHistoryError:
            click.echo(f"No command history for workspace '{name}'")
            return

    click.echo(f"\n=== Command History for '{name}' (last {lines} commands) ===")
    click.echo("-" * 80)
    for i, entry in enumerate(entries, start=1):
        click.echo(f"{i:3d}. {entry}")
    click.echo()


@manager.command("help")
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this help message."""
    click.echo(ctx.parent.get_help())


# ---------------------------------------------------------------------------
# bashlog: instrumented shell session
# ---------------------------------------------------------------------------


@click.command("bashlog")
@click.option("--tz", "timezone", default=None, help="Timezone for logging (e.g., UTC, America/New_York).")
@click.option("--date", default=None, help="Date for logging (YYYY-MM-DD format).")
@click.option("--time", "time_", default=None, help="Time for logging (HH:MM:SS format).")
@click.pass_context
def launcher(ctx: click.Context, timezone: str | None, date: str | None, time_: str | None) -> None:
    """Start an interactive shell with bash command logging enabled."""
    from bashlog.session import build_session_config, launch, write_rc
    from bashlog.settings import get_settings

    settings = get_settings()
    _setup(settings.log_level)

    with _translate_errors():
        config = build_session_config(
            settings.resolved_state_root(),
            timezone or settings.default_timezone,
            date,
            time_,
        )
        _show_session_info(config)
        write_rc(config)
        status = launch(config, default_shell=settings.default_shell)

    ctx.exit(status)


def _show_session_info(config: SessionConfig) -> None:
    click.echo("====================================")
    click.echo("         Bashlog Session Info")
    click.echo("====================================")
    click.echo(f"Timezone:    {config.timezone}")
    click.echo(f"Date:        {config.date}")
    click.echo(f"Time:        {config.time}")
    click.echo(f"Session ID:  {config.session_id}")
    click.echo(f"Log Dir:     {config.log_dir}")
    click.echo(f"RC File:     {config.rc_file}")
    click.echo("====================================")


if __name__ == "__main__":
    manager()
