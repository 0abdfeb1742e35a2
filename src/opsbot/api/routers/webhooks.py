"""Webhook endpoints.

Endpoints
---------
``POST /webhooks/github``      — receive a GitHub webhook delivery and dispatch it
``GET  /webhooks/operations``  — list loaded operations and their triggers
``POST /webhooks/reload``      — re-read the operation configs

The event type is ``<X-GitHub-Event>.<payload.action>``. Signature
verification is left to the proxy in front of the bot.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Header, HTTPException, Request, status
from pydantic import BaseModel

from opsbot.bot import Bot
from opsbot.core.errors import ConfigError
from opsbot.framework.logging import get_logger
from opsbot.github.events import event_type_from_delivery

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


# ── Models ───────────────────────────────────────────────────────────


class OperationRunSummary(BaseModel):
    operation: str
    status: str
    tasks: list[dict[str, Any]]


class DeliveryResponse(BaseModel):
    """Response returned after a delivery has been dispatched."""

    delivery_id: str | None
    event_type: str
    operations: list[OperationRunSummary]


class OperationInfo(BaseModel):
    name: str
    events: list[str]
    tasks: list[str]


# ── Endpoints ────────────────────────────────────────────────────────


def _bot(request: Request) -> Bot:
    bot: Bot | None = getattr(request.app.state, "bot", None)
    if bot is None:
        raise HTTPException(status_code=503, detail="Bot is not loaded")
    return bot


@router.post("/github", response_model=DeliveryResponse, status_code=status.HTTP_202_ACCEPTED)
async def receive_github_webhook(
    request: Request,
    x_github_event: str = Header(..., alias="X-GitHub-Event"),
    x_github_delivery: str | None = Header(None, alias="X-GitHub-Delivery"),
) -> DeliveryResponse:
    """Dispatch one webhook delivery to every matching operation.

    Task outcomes never change the HTTP status: the delivery was accepted
    either way, and failures are reported through logs.
    """
    bot = _bot(request)
    try:
        payload = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Body is not valid JSON") from e
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Body must be a JSON object")

    runs = await bot.handle_event(x_github_event, payload, delivery_id=x_github_delivery)
    event_type = runs[0].event_type if runs else event_type_from_delivery(x_github_event, payload)

    logger.info("webhook.dispatched", event_type=event_type, delivery_id=x_github_delivery, operations=len(runs))
    return DeliveryResponse(
        delivery_id=x_github_delivery,
        event_type=event_type,
        operations=[
            OperationRunSummary(
                operation=run.operation,
                status=run.status.value,
                tasks=[result.to_dict() for result in run.results],
            )
            for run in runs
        ],
    )


@router.get("/operations", response_model=list[OperationInfo])
async def list_operations(request: Request) -> list[OperationInfo]:
    """List loaded operations in load order."""
    bot = _bot(request)
    return [
        OperationInfo(name=op.name, events=list(op.events), tasks=op.task_names)
        for op in bot.dispatcher.operations
    ]


@router.post("/reload", response_model=list[OperationInfo])
async def reload_operations(request: Request) -> list[OperationInfo]:
    """Re-read the operation configs from disk.

    A config error leaves the loaded operations in place and is reported
    as 422.
    """
    bot = _bot(request)
    try:
        await bot.reload_operations()
    except ConfigError as e:
        logger.warning("webhook.reload_failed", error_type=type(e).__name__, error_message=str(e))
        raise HTTPException(status_code=422, detail=str(e)) from e
    logger.info("webhook.reloaded", operations=len(bot.dispatcher.operations))
    return await list_operations(request)
