"""Process settings for opsbot.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    Operation and resource documents describe *what* the bot does; these
    settings describe *where* it finds them and how it talks to GitHub.

    - **Pydantic validation:** Type-checked at startup, not at dispatch
    - **Environment-driven:** Reads ``OPSBOT_*`` env vars and ``.env``
    - **Extra ignore:** Unknown env vars don't cause startup failures

Examples:
    >>> from opsbot.core.settings import BotSettings
    >>> settings = BotSettings(operations_path="configs/operations")
    >>> settings.github_api_url
    'https://api.github.com/graphql'

Tags:
    settings, configuration, pydantic, environment, opsbot-core

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Settings for the webhook server, CLI and GitHub client.

    Fields
    ──────
    operations_path       : Operation config file or directory of files
    resource_path         : Resource config (organizations, projects, fields)
    github_token          : Token used for GraphQL calls
    github_api_url        : GraphQL endpoint
    github_timeout        : HTTP timeout in seconds
    concurrent_operations : Run matching operations concurrently
    host / port           : Bind address for ``opsbot serve``
    log_level / log_format: structlog configuration
    """

    model_config = SettingsConfigDict(
        env_prefix="OPSBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Documents ────────────────────────────────────────────────
    operations_path: Path = Field(
        default=Path("configs/operations"),
        description="Operation config file or directory",
    )
    resource_path: Path | None = Field(
        default=None,
        description="Resource config file (organizations/projects/fields)",
    )

    # ── GitHub ───────────────────────────────────────────────────
    github_token: SecretStr | None = None
    github_api_url: str = "https://api.github.com/graphql"
    github_timeout: float = Field(default=30.0, gt=0)

    # ── Dispatch ─────────────────────────────────────────────────
    concurrent_operations: bool = False

    # ── Network ──────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000

    # ── Observability ────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


@lru_cache(maxsize=1)
def get_settings() -> BotSettings:
    """Return the process-wide settings, read once from the environment."""
    return BotSettings()
