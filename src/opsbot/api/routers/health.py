"""
Health router - liveness probe.

Endpoints:
    GET /health         Liveness plus the number of loaded operations
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthStatus(BaseModel):
    status: str
    operations: int


@router.get("/health", response_model=HealthStatus)
async def get_health(request: Request) -> HealthStatus:
    bot = getattr(request.app.state, "bot", None)
    if bot is None:
        return HealthStatus(status="starting", operations=0)
    return HealthStatus(status="ok", operations=len(bot.dispatcher.operations))
