"""
Root Typer application for the opsbot CLI.

    opsbot validate configs/operations
    opsbot operations configs/operations
    opsbot calls
    opsbot dispatch issues --payload event.json --resources configs/resources.yml
    opsbot serve --port 3000
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.markup import escape

from opsbot.bot import build_bot
from opsbot.calls import default_registry
from opsbot.cli.serve import serve
from opsbot.cli.utils import console, err_console, exit_with_error, make_settings, print_operations
from opsbot.config.loader import load_operations
from opsbot.core.errors import OpsbotError
from opsbot.framework.logging import configure_logging

app = typer.Typer(
    name="opsbot",
    help="opsbot — run YAML-declared operations on GitHub webhook events.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from opsbot import __version__

        typer.echo(f"opsbot {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG | INFO | WARNING | ERROR"),
) -> None:
    """opsbot CLI — validate operation configs and dispatch events."""
    configure_logging(level=log_level.upper() if log_level else None)


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("validate")
def validate(
    path: Path = typer.Argument(..., help="Operation config file or directory"),
) -> None:
    """Read, validate and materialize operation configs against the built-in calls."""
    try:
        operations = load_operations(path, default_registry())
    except OpsbotError as e:
        exit_with_error(e)
    console.print(f"[bold green]OK[/bold green] {len(operations)} operation(s) in {path}")


@app.command("operations")
def list_operations(
    path: Path = typer.Argument(..., help="Operation config file or directory"),
) -> None:
    """List operations, their trigger events and their task order."""
    try:
        operations = load_operations(path, default_registry())
    except OpsbotError as e:
        exit_with_error(e)
    print_operations(operations)


@app.command("calls")
def list_calls() -> None:
    """List the task calls operations may reference."""
    for name in default_registry().names():
        typer.echo(name)


@app.command("dispatch")
def dispatch(
    event: str = typer.Argument(..., help="Webhook event name, e.g. 'issues'"),
    payload: Path = typer.Option(..., "--payload", "-p", help="JSON webhook payload file"),
    operations: Path | None = typer.Option(None, "--operations", "-o", help="Operation config file or directory"),
    resources: Path | None = typer.Option(None, "--resources", "-r", help="Resource config file"),
    as_json: bool = typer.Option(False, "--json", help="Print run results as JSON"),
) -> None:
    """Dispatch one event locally, as if GitHub had delivered it."""
    try:
        document = json.loads(payload.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        err_console.print(f"[bold red]Error[/bold red]: cannot read payload {escape(str(payload))}: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    settings = make_settings(operations=operations, resources=resources)
    try:
        bot = build_bot(settings)
    except OpsbotError as e:
        exit_with_error(e)

    async def _run():
        try:
            return await bot.handle_event(event, document)
        finally:
            await bot.aclose()

    runs = asyncio.run(_run())

    if as_json:
        console.print_json(
            json.dumps(
                [
                    {
                        "operation": run.operation,
                        "status": run.status.value,
                        "tasks": [result.to_dict() for result in run.results],
                    }
                    for run in runs
                ],
                default=str,
            )
        )
        return

    if not runs:
        console.print("[dim]No operation matched.[/dim]")
        return
    for run in runs:
        tasks = ", ".join(f"{r.task}={r.status.value}" for r in run.results)
        console.print(f"[bold]{run.operation}[/bold] {run.status.value} ({tasks})")


app.command("serve")(serve)
