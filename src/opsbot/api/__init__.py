"""
Webhook HTTP surface for opsbot.

Manifesto:
    GitHub delivers events over HTTP. This package turns a delivery into
    a dispatch and nothing more: no state, no persistence, no retries.

Tags:
    opsbot, api, webhooks, FastAPI

Doc-Types:
    api-reference
"""

from opsbot.api.app import create_app

__all__ = ["create_app"]
