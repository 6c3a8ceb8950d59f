"""Command-line interface for backedup."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import typer
from rich.console import Console
from rich.table import Table

from .config import ConfigError, default_config_path, ensure_config, expand_path, load_config, resolve_home
from .manager import BackedupError, BackupManager
from .models import Operation, PathAction, PathResult

app = typer.Typer(help="Move dotfiles into a backup directory and leave symlinks behind")
console = Console()
err_console = Console(stderr=True)


def _load_manager(config: Path | None) -> BackupManager:
    home = resolve_home()
    config_path = default_config_path(home) if config is None else expand_path(config, home_dir=home)
    ensure_config(config_path, home_dir=home, console=err_console)
    return BackupManager(load_config(config_path, home_dir=home), console=err_console)


def _handle_error(exc: Exception) -> None:
    if isinstance(exc, PermissionError):
        console.print("[red]Permission denied.[/red] Re-run the command with elevated privileges (e.g. `sudo`).")
        raise typer.Exit(code=1)
    if isinstance(exc, (ConfigError, BackedupError)):
        console.print(f"ERRO: {exc}", style="red", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=1)
    raise exc


def _select_operation(*, backup: bool, restore: bool, uninstall: bool) -> Operation | None:
    if uninstall:
        return Operation.UNINSTALL
    if backup:
        return Operation.BACKUP
    if restore:
        return Operation.RESTORE
    return None


def _format_results(results: Iterable[PathResult]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Path", overflow="fold")
    table.add_column("Backup path", overflow="fold")
    table.add_column("Action")
    table.add_column("Details", overflow="fold")

    action_styles = {
        PathAction.LINKED: "green",
        PathAction.RESTORED: "green",
        PathAction.SKIPPED: "yellow",
        PathAction.FAILED: "red",
    }

    for result in results:
        style = action_styles.get(result.action, "white")
        table.add_row(
            str(result.path),
            str(result.backup_path) if result.backup_path is not None else "",
            f"[{style}]{result.action.value}[/{style}]",
            result.details or "",
        )

    console.print(table)


@app.command()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-config",
        "-c",
        help="Path to the backedup config file (default: $HOME/.backedup.yaml)",
    ),
    backup: bool = typer.Option(
        False,
        "--backup",
        "-backup",
        help="Move the configured files to the backup path and leave symlinks behind.",
    ),
    restore: bool = typer.Option(
        False,
        "--restore",
        "-restore",
        help="Create symlinks for previously backed up files.",
    ),
    uninstall: bool = typer.Option(
        False,
        "--uninstall",
        "-uninstall",
        help="Replace the symlinks with copies of the backed up files.",
    ),
) -> None:
    """Back up, restore or uninstall the configured dotfiles."""

    operation = _select_operation(backup=backup, restore=restore, uninstall=uninstall)
    # checked before the config is loaded; a bare invocation never prompts
    if operation is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    try:
        manager = _load_manager(config)
        results = manager.run(operation)
        _format_results(results)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)

    console.print("done")


def run() -> None:
    """Entry point used for console_script bindings."""

    app()
