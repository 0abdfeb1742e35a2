"""Allow ``python -m opsbot``."""

from opsbot.cli.app import app

app()
