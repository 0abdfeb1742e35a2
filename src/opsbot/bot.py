"""
Bot bootstrap - wire settings, registry, configs and dispatcher together.

Everything that can fail because of configuration fails here, before the
first event is served:

    settings ──► registry ──► resource config ──► operation configs ──► Dispatcher
                                                 (UnknownTaskCallError here)

Usage:
    bot = build_bot(get_settings())
    runs = await bot.handle_event("issues", payload, delivery_id="...")
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from opsbot.calls import default_registry
from opsbot.config.loader import load_operations
from opsbot.core.settings import BotSettings
from opsbot.framework.context import EventContext
from opsbot.framework.dispatcher import Dispatcher, OperationRun
from opsbot.framework.logging import get_logger
from opsbot.framework.registry import TaskRegistry
from opsbot.github.client import GitHubClient
from opsbot.github.events import event_type_from_delivery
from opsbot.resources.models import Resource, load_resource

log = get_logger(__name__)


@dataclass
class Bot:
    """A fully loaded bot: read-only registry, resources and operations."""

    settings: BotSettings
    registry: TaskRegistry
    dispatcher: Dispatcher
    resources: Resource | None = None
    github: GitHubClient | None = None

    def context_for(
        self,
        event_type: str,
        payload: Mapping[str, Any],
        delivery_id: str | None = None,
    ) -> EventContext:
        kwargs: dict[str, Any] = {}
        if delivery_id:
            kwargs["delivery_id"] = delivery_id
        return EventContext(
            event_type=event_type,
            payload=payload,
            github=self.github,
            resources=self.resources,
            **kwargs,
        )

    async def handle_event(
        self,
        event_name: str,
        payload: Mapping[str, Any],
        delivery_id: str | None = None,
    ) -> list[OperationRun]:
        """Name the event from the webhook header and payload, then dispatch it."""
        event_type = event_type_from_delivery(event_name, payload)
        context = self.context_for(event_type, payload, delivery_id)
        return await self.dispatcher.dispatch(event_type, context)

    async def reload_operations(self) -> None:
        """Re-read the operation configs; in-flight dispatches are unaffected."""
        operations = load_operations(self.settings.operations_path, self.registry)
        await self.dispatcher.reload(operations)

    async def aclose(self) -> None:
        if self.github is not None:
            await self.github.aclose()


def build_bot(
    settings: BotSettings,
    registry: TaskRegistry | None = None,
    github: GitHubClient | None = None,
) -> Bot:
    """
    Load everything the bot needs from ``settings``.

    Raises:
        ConfigError and subclasses (including UnknownTaskCallError)
    """
    registry = registry if registry is not None else default_registry()

    resources = load_resource(settings.resource_path) if settings.resource_path else None
    operations = load_operations(settings.operations_path, registry)

    if github is None and settings.github_token is not None:
        github = GitHubClient(
            settings.github_token.get_secret_value(),
            url=settings.github_api_url,
            timeout=settings.github_timeout,
        )

    log.info(
        "bot.ready",
        operations=[op.name for op in operations],
        calls=registry.names(),
        resources=resources is not None,
        github=github is not None,
    )
    return Bot(
        settings=settings,
        registry=registry,
        dispatcher=Dispatcher(operations, concurrent=settings.concurrent_operations),
        resources=resources,
        github=github,
    )
