"""Command-line interface for dotstow."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import CONFIG_ENV_VAR, resolve_config_path
from .errors import ConfigParseError, DotstowError
from .logging import setup_logging
from .manager import DotstowManager
from .models import LinkState, OperationAction, OperationResult, StatusEntry

app = typer.Typer(help="Move dotfiles into a managed directory and symlink them back")
console = Console()


def _load_manager(config: Path | None) -> DotstowManager:
    return DotstowManager(resolve_config_path(config))


def _handle_error(exc: Exception) -> None:
    if isinstance(exc, PermissionError):
        console.print("[red]Permission denied.[/red] Re-run the command with elevated privileges (e.g. `sudo`).")
        raise typer.Exit(code=1)
    if isinstance(exc, ConfigParseError):
        console.print(str(exc), markup=False, style="red", soft_wrap=True)
        console.print("[yellow]Fix or remove the registry file, or point --config at another one.[/yellow]")
        raise typer.Exit(code=1)
    if isinstance(exc, DotstowError):
        console.print(str(exc), markup=False, style="red", soft_wrap=True)
        raise typer.Exit(code=1)
    raise exc


action_styles = {
    OperationAction.STOWED: "green",
    OperationAction.DEPLOYED: "green",
    OperationAction.RESTORED: "green",
    OperationAction.UNCHANGED: "cyan",
    OperationAction.PARTIAL: "yellow",
    OperationAction.FAILED: "red",
}


def _format_results(results: Iterable[OperationResult]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Path", overflow="fold")
    table.add_column("Action", no_wrap=True)
    table.add_column("Stowed at", overflow="fold")
    table.add_column("Details", overflow="fold")

    for result in results:
        style = action_styles.get(result.action, "white")
        table.add_row(
            Text(str(result.path)),
            f"[{style}]{result.action.value}[/{style}]",
            Text(str(result.stow_path) if result.stow_path else ""),
            Text(result.details or ""),
        )

    console.print(table)


def _format_status(entries: Iterable[StatusEntry]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Link", overflow="fold")
    table.add_column("Stowed at", overflow="fold")
    table.add_column("State", no_wrap=True)
    table.add_column("Details", overflow="fold")

    state_styles = {
        LinkState.LINKED: "green",
        LinkState.MISSING_LINK: "yellow",
        LinkState.OCCUPIED: "red",
        LinkState.STOW_MISSING: "red",
    }

    for item in entries:
        style = state_styles.get(item.state, "white")
        table.add_row(
            Text(str(item.entry.link_path)),
            Text(str(item.entry.stow_path)),
            f"[{style}]{item.state.value}[/{style}]",
            item.details or "",
        )

    console.print(table)


def _finish(results: list[OperationResult]) -> None:
    _format_results(results)
    if not all(result.ok for result in results):
        raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Move dotfiles into a managed directory and symlink them back."""

    setup_logging(debug=verbose)


@app.command()
def stow(
    symlink_dir: Path = typer.Argument(..., help="Root under which the live dotfiles reside"),
    dotfiles_dir: Path = typer.Argument(..., help="Directory the dotfiles are moved into"),
    files: list[Path] = typer.Argument(..., help="Files, directories or glob patterns to stow"),
    config: Path | None = typer.Option(None, "--config", "-c", envvar=CONFIG_ENV_VAR, help="Path to the registry file"),
) -> None:
    """Move files into the dotfiles directory and replace them with symlinks."""

    try:
        manager = _load_manager(config)
        results = manager.stow(symlink_dir, dotfiles_dir, files)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _finish(results)


@app.command()
def deploy(
    files: list[Path] = typer.Argument(None, help="Tracked dotfiles to link (link or stowed path)"),
    all_: bool = typer.Option(False, "--all", "-a", help="Deploy every tracked dotfile"),
    config: Path | None = typer.Option(None, "--config", "-c", envvar=CONFIG_ENV_VAR, help="Path to the registry file"),
) -> None:
    """Create missing symlinks for tracked dotfiles."""

    if all_ and files:
        console.print("[red]Pass either --all or a list of files, not both.[/red]")
        raise typer.Exit(code=2)
    if not all_ and not files:
        console.print("[red]Nothing to deploy. Pass files or --all.[/red]")
        raise typer.Exit(code=2)

    try:
        manager = _load_manager(config)
        results = manager.deploy_all() if all_ else manager.deploy(files)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _finish(results)


@app.command()
def restore(
    dotfiles_dir: Path = typer.Argument(..., help="Directory the dotfiles were stowed into"),
    files: list[Path] = typer.Argument(..., help="Tracked dotfiles to move back (link or stowed path)"),
    config: Path | None = typer.Option(None, "--config", "-c", envvar=CONFIG_ENV_VAR, help="Path to the registry file"),
) -> None:
    """Replace symlinks with the stowed files and stop tracking them."""

    try:
        manager = _load_manager(config)
        results = manager.restore(dotfiles_dir, files)
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return
    _finish(results)


@app.command()
def status(
    config: Path | None = typer.Option(None, "--config", "-c", envvar=CONFIG_ENV_VAR, help="Path to the registry file"),
) -> None:
    """Show tracked dotfiles and whether their symlinks are in place."""

    try:
        manager = _load_manager(config)
        entries = manager.status()
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return

    if not entries:
        console.print("[yellow]No dotfiles are tracked yet.[/yellow]")
        return
    _format_status(entries)


def run() -> None:
    """Entry point used for console_script bindings."""

    app()
