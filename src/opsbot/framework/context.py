"""Runtime context handed to every task call."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

if TYPE_CHECKING:
    from opsbot.github.client import GitHubClient
    from opsbot.resources.models import Resource


@dataclass(frozen=True)
class EventContext:
    """
    One delivered event plus the collaborators tasks may use.

    The dispatcher routes on ``event_type`` only; ``payload`` is passed to
    tasks untouched.

    Attributes:
        event_type: ``<event>.<action>`` (e.g. ``issues.labeled``)
        payload: Webhook payload as delivered
        github: GraphQL client, or None when running without credentials
        resources: Resource config, or None when not loaded
        delivery_id: Webhook delivery id (generated when absent)
    """

    event_type: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    github: GitHubClient | None = None
    resources: Resource | None = None
    delivery_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def repository_owner(self) -> str | None:
        repo = self.payload.get("repository") or {}
        return (repo.get("owner") or {}).get("login")

    @property
    def repository_name(self) -> str | None:
        return (self.payload.get("repository") or {}).get("name")

    @property
    def label_name(self) -> str | None:
        """Name of the label on ``*.labeled``/``*.unlabeled`` payloads."""
        return (self.payload.get("label") or {}).get("name")

    @property
    def issue_node_id(self) -> str | None:
        """GraphQL node id of the issue or pull request the event is about."""
        subject = self.payload.get("issue") or self.payload.get("pull_request") or {}
        return subject.get("node_id")
