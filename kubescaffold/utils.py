"""Shared console helpers for kubescaffold.

All user-facing output goes through the Rich ``console`` defined here so that
tests can swap it for a recording console.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.table import Table

from kubescaffold.machinery.writer import RenderedFile, WriteAction

console = Console()

ACTION_STYLES: dict[WriteAction, str] = {
    WriteAction.CREATED: "green",
    WriteAction.OVERWRITTEN: "yellow",
    WriteAction.SKIPPED: "dim",
}


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_rendered_files(
    files: Iterable[RenderedFile],
    root: str | Path | None = None,
    title: str = "Scaffolded files",
) -> None:
    """Print one row per handled file with the action the writer took.

    Paths are shown relative to *root* when given.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("File", no_wrap=True)
    table.add_column("Action")

    for rendered in files:
        path = rendered.path
        if root is not None:
            try:
                path = path.relative_to(root)
            except ValueError:
                pass
        style = ACTION_STYLES.get(rendered.action, "white")
        table.add_row(str(path), f"[{style}]{rendered.action.value}[/{style}]")

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")
