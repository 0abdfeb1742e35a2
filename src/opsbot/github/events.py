"""Webhook event naming."""

from collections.abc import Mapping
from typing import Any


def event_type_from_delivery(event_name: str, payload: Mapping[str, Any]) -> str:
    """
    ``<X-GitHub-Event>.<payload action>``, or just the event name when the
    payload carries no action (``push``, ``create``).

    >>> event_type_from_delivery("issues", {"action": "labeled"})
    'issues.labeled'
    >>> event_type_from_delivery("push", {})
    'push'
    """
    action = payload.get("action")
    if isinstance(action, str) and action:
        return f"{event_name}.{action}"
    return event_name
