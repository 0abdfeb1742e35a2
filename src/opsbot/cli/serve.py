"""
CLI: ``opsbot serve`` — start the webhook server.
"""

from __future__ import annotations

import typer
import uvicorn

from opsbot.cli.utils import console
from opsbot.core.settings import get_settings


def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: OPSBOT_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: OPSBOT_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    log_level: str = typer.Option("info", "--uvicorn-log-level"),
) -> None:
    """Start the webhook server."""
    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[bold green]Starting opsbot[/bold green] on {host}:{port}")
    uvicorn.run(
        "opsbot.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )
