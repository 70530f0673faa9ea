"""CLI application for wsm using Rich and Typer."""

import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wsm.core.config import WSM_VAULT, validate_environment
from wsm.core.errors import RollbackFailure, WorkspaceError
from wsm.core.manager import WorkspaceManager
from wsm.core.process import get_obsidian_status
from wsm.core.types import TransferResult
from wsm.core.vault import discover_vaults

app = typer.Typer(
    name="wsm",
    help="wsm - move, copy and delete tabs between Obsidian workspaces",
    no_args_is_help=True,
)

console = Console()

EXIT_FAILED = 1
EXIT_FATAL = 2

VAULT_OPTION_HELP = "Path to vault directory (default: $WSM_VAULT or last opened)"


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        console.print("[dim]Debug logging enabled[/dim]")


def _get_vault_path(vault: Optional[str]) -> Path:
    """Resolve vault path from argument, env var, or the last opened vault."""
    if vault:
        path = Path(vault).expanduser()
        if path.is_dir():
            return path
        console.print(f"[red]Vault path not found: {vault}[/red]")
        raise typer.Exit(EXIT_FAILED)

    env_vault = os.environ.get("WSM_VAULT") or WSM_VAULT
    if env_vault:
        path = Path(env_vault).expanduser()
        if path.is_dir():
            return path

    known = discover_vaults()
    if known:
        return Path(known[0].path)

    console.print("[red]No vault found. Use --vault or set WSM_VAULT.[/red]")
    raise typer.Exit(EXIT_FAILED)


def _get_manager(
    vault: Optional[str], check_running: Optional[bool] = None
) -> WorkspaceManager:
    is_valid, message = validate_environment()
    if not is_valid:
        console.print(f"[red]Error: {message}[/red]")
        raise typer.Exit(EXIT_FAILED)
    return WorkspaceManager(_get_vault_path(vault), check_running=check_running)


def _fail(error: Exception, mutating: bool = False) -> None:
    """Print an error and exit, keeping fatal rollback failures distinct.

    Args:
        error: The failure to report
        mutating: The failed command writes workspaces.json
    """
    if isinstance(error, RollbackFailure):
        console.print(
            Panel.fit(
                f"[bold red]{error}[/bold red]\n\n"
                "The operation failed AND the automatic restore failed.\n"
                f"Restore manually from: {error.backup_path}",
                title="FATAL",
                border_style="red",
            )
        )
        raise typer.Exit(EXIT_FATAL)
    console.print(f"[red]Error: {error}[/red]")
    if mutating:
        console.print("[dim]workspaces.json was not changed.[/dim]")
    raise typer.Exit(EXIT_FAILED)


def _print_result(result: TransferResult) -> None:
    verb = {"move": "Moved", "copy": "Copied", "delete": "Deleted"}[
        result.operation.value
    ]
    where = f"{result.source} -> {result.target}" if result.target else result.source
    style = "green" if result.count else "yellow"
    console.print(f"[{style}]{verb} {result.count} tab(s): {where}[/{style}]")
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")
    if result.missing:
        console.print(
            "[dim]Unknown tab ids are skipped, not treated as errors. "
            "Use --strict to fail instead.[/dim]"
        )


@app.command()
def vaults():
    """List vaults known to Obsidian, most recently opened first."""
    known = discover_vaults()
    if not known:
        console.print("[dim]No vaults found.[/dim]")
        return

    table = Table(title="Vaults", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim")
    table.add_column("Name", style="green")
    table.add_column("Path")
    table.add_column("Status")
    for i, vault in enumerate(known, 1):
        status = "[green]open[/green]" if vault.open else ""
        table.add_row(str(i), vault.name, vault.path, status)
    console.print(table)


@app.command()
def status():
    """Check whether Obsidian is running."""
    obsidian = get_obsidian_status()
    if obsidian.is_running:
        console.print(
            "[yellow]Obsidian is running - quit it before editing workspaces.[/yellow]"
        )
        raise typer.Exit(EXIT_FAILED)
    console.print("[green]Obsidian is not running.[/green]")


@app.command()
def workspaces(
    vault: Optional[str] = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
):
    """List workspaces, most recently modified first."""
    manager = _get_manager(vault, check_running=False)
    try:
        summaries = manager.list_workspaces()
    except WorkspaceError as e:
        _fail(e)

    if not summaries:
        console.print("[dim]No workspaces yet.[/dim]")
        return

    table = Table(title=f"Workspaces in {manager.vault.name}", show_header=True)
    table.add_column("Name", style="green")
    table.add_column("Tabs", justify="right")
    table.add_column("Modified")
    table.add_column("Status")
    for summary in summaries:
        status = "[green]active[/green]" if summary.is_active else ""
        table.add_row(summary.name, str(summary.tab_count), summary.mtime, status)
    console.print(table)


@app.command()
def tabs(
    workspace: str = typer.Argument(..., help="Workspace name"),
    vault: Optional[str] = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
):
    """List the tabs of a workspace."""
    manager = _get_manager(vault, check_running=False)
    try:
        tab_list = manager.list_tabs(workspace)
    except WorkspaceError as e:
        _fail(e)

    if not tab_list:
        console.print(f"[dim]No tabs in {workspace}.[/dim]")
        return

    table = Table(title=f"Tabs in {workspace}", show_header=True)
    table.add_column("#", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("File")
    for i, tab in enumerate(tab_list, 1):
        table.add_row(str(i), tab.id, tab.title, tab.file_path)
    console.print(table)


@app.command()
def move(
    source: str = typer.Argument(..., help="Workspace to move tabs from"),
    target: str = typer.Argument(..., help="Workspace to move tabs to"),
    tab_ids: List[str] = typer.Argument(..., help="Tab ids (see `wsm tabs`)"),
    vault: Optional[str] = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
    strict: bool = typer.Option(False, "--strict", help="Fail on unknown tab ids"),
    force: bool = typer.Option(False, "--force", help="Write even if Obsidian runs"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Move tabs from one workspace to another."""
    _configure_logging(debug)
    manager = _get_manager(vault)
    try:
        result = manager.move_tabs(
            source, target, tab_ids, strict=strict or None, force=force
        )
    except WorkspaceError as e:
        _fail(e, mutating=True)
    _print_result(result)


@app.command()
def copy(
    source: str = typer.Argument(..., help="Workspace to copy tabs from"),
    target: str = typer.Argument(..., help="Workspace to copy tabs to"),
    tab_ids: List[str] = typer.Argument(..., help="Tab ids (see `wsm tabs`)"),
    vault: Optional[str] = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
    strict: bool = typer.Option(False, "--strict", help="Fail on unknown tab ids"),
    force: bool = typer.Option(False, "--force", help="Write even if Obsidian runs"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Copy tabs from one workspace to another."""
    _configure_logging(debug)
    manager = _get_manager(vault)
    try:
        result = manager.copy_tabs(
            source, target, tab_ids, strict=strict or None, force=force
        )
    except WorkspaceError as e:
        _fail(e, mutating=True)
    _print_result(result)


@app.command()
def delete(
    workspace: str = typer.Argument(..., help="Workspace to delete tabs from"),
    tab_ids: List[str] = typer.Argument(..., help="Tab ids (see `wsm tabs`)"),
    vault: Optional[str] = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
    strict: bool = typer.Option(False, "--strict", help="Fail on unknown tab ids"),
    force: bool = typer.Option(False, "--force", help="Write even if Obsidian runs"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Delete tabs from a workspace."""
    _configure_logging(debug)
    manager = _get_manager(vault)
    try:
        result = manager.delete_tabs(
            workspace, tab_ids, strict=strict or None, force=force
        )
    except WorkspaceError as e:
        _fail(e, mutating=True)
    _print_result(result)


@app.command()
def backups(
    vault: Optional[str] = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
):
    """List backups of workspaces.json, newest first."""
    manager = _get_manager(vault, check_running=False)
    backup_list = manager.list_backups()
    if not backup_list:
        console.print("[dim]No backups yet.[/dim]")
        return

    table = Table(title=f"Backups in {manager.settings.backup_dir}", show_header=True)
    table.add_column("#", style="dim")
    table.add_column("File")
    table.add_column("Size", justify="right")
    for i, path in enumerate(backup_list, 1):
        table.add_row(str(i), path.name, f"{path.stat().st_size} B")
    console.print(table)


@app.command()
def restore(
    backup: str = typer.Argument(..., help="Backup file name or path"),
    vault: Optional[str] = typer.Option(None, "--vault", "-v", help=VAULT_OPTION_HELP),
    force: bool = typer.Option(False, "--force", help="Write even if Obsidian runs"),
):
    """Replace workspaces.json with a backup."""
    manager = _get_manager(vault)
    try:
        restored = manager.restore_backup(backup, force=force)
    except WorkspaceError as e:
        _fail(e, mutating=True)
    console.print(f"[green]Restored workspaces.json from {restored.name}[/green]")


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
