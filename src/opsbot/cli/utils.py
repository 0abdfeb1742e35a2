"""
CLI utility helpers - consoles, settings overrides and error output.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from opsbot.core.errors import OpsbotError
from opsbot.core.settings import BotSettings, get_settings
from opsbot.framework.operation import Operation

console = Console()
err_console = Console(stderr=True)


def make_settings(
    operations: Path | None = None,
    resources: Path | None = None,
) -> BotSettings:
    """Environment settings with the paths given on the command line applied."""
    overrides: dict[str, object] = {}
    if operations is not None:
        overrides["operations_path"] = operations
    if resources is not None:
        overrides["resource_path"] = resources
    settings = get_settings()
    return settings.model_copy(update=overrides) if overrides else settings


def exit_with_error(error: OpsbotError) -> None:
    """Print a config or task error and exit non-zero."""
    err_console.print(f"[bold red]Error[/bold red] ({type(error).__name__}): {escape(error.message)}")
    for key, value in error.context.to_dict().items():
        err_console.print(f"  [dim]{key}[/dim]: {escape(str(value))}")
    raise typer.Exit(code=1)


def print_operations(operations: list[Operation], *, title: str = "Operations") -> None:
    if not operations:
        console.print("[dim]No operations.[/dim]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("NAME")
    table.add_column("EVENTS")
    table.add_column("TASKS")
    for operation in operations:
        table.add_row(operation.name, ", ".join(operation.events), " -> ".join(operation.task_names))
    console.print(table)
