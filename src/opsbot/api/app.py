"""
FastAPI application factory.

``create_app()`` wires the lifespan (loading the bot) and the routers into
a single ``FastAPI`` instance, ready for uvicorn::

    uvicorn opsbot.api:create_app --factory

Manifesto:
    The app factory is the single composition root for the HTTP side. The
    bot is loaded during startup, so a bad config stops the server before
    it accepts a single webhook.

Tags:
    opsbot, api, app-factory, FastAPI

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from opsbot.bot import Bot, build_bot
from opsbot.core.settings import BotSettings, get_settings
from opsbot.framework.logging import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load the bot on startup, close clients on shutdown."""
    log = get_logger("opsbot.api")

    if getattr(app.state, "bot", None) is None:
        app.state.bot = build_bot(app.state.settings)
    log.info("opsbot API starting", operations=len(app.state.bot.dispatcher.operations))

    yield

    await app.state.bot.aclose()
    log.info("opsbot API shutting down")


def create_app(
    *,
    settings: BotSettings | None = None,
    bot: Bot | None = None,
) -> FastAPI:
    """Build and return the webhook application.

    Parameters
    ----------
    settings : BotSettings | None
        Override settings (useful for testing). Defaults to the cached
        environment settings.
    bot : Bot | None
        Pre-built bot (tests). When ``None`` the bot is built from
        ``settings`` during startup.
    """
    if settings is None:
        settings = bot.settings if bot is not None else get_settings()
    configure_logging(level=settings.log_level, format=settings.log_format)

    app = FastAPI(title="opsbot", lifespan=lifespan)
    app.state.settings = settings
    app.state.bot = bot

    from opsbot.api.routers import health, webhooks

    app.include_router(health.router)
    app.include_router(webhooks.router)

    return app
