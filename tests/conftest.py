"""
Shared pytest fixtures for opsbot tests.

This module provides:
- A resource config with one organization, repository and project
- Webhook payload and EventContext factories
- A mocked GitHub GraphQL client
- Registry helpers for ad-hoc task calls

Usage:
    async def test_something(make_context, github):
        ctx = make_context("issues.labeled", label="Roadmap:Releases", github=github)
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from opsbot.framework.context import EventContext
from opsbot.framework.logging import configure_logging
from opsbot.framework.registry import TaskCall, TaskRegistry, TaskRegistryBuilder
from opsbot.resources.models import Resource

ORG = "opensearch-project"
REPO = "opensearch-build"
PROJECT = f"{ORG}/206"

RESOURCE_DOCUMENT: dict[str, Any] = {
    "organizations": {
        ORG: {
            "repositories": [REPO],
            "projects": {
                206: {
                    "nodeId": "PVT_kwDOBVjvKc4AcnXk",
                    "fields": {
                        "Roadmap": {
                            "nodeId": "PVTSSF_roadmap",
                            "fieldType": "SINGLE_SELECT",
                            "options": [
                                {"id": "opt-releases", "name": "Releases"},
                                {"id": "opt-releases-health", "name": "Releases, Project Health"},
                            ],
                        },
                        "Notes": {
                            "nodeId": "PVTF_notes",
                            "fieldType": "TEXT",
                        },
                    },
                }
            },
        }
    }
}


@pytest.fixture(autouse=True, scope="session")
def structured_logging():
    """Route structlog through stdlib logging (stderr) so command output stays clean."""
    configure_logging(level="DEBUG", format="console", force=True)


def make_registry(**calls: TaskCall) -> TaskRegistry:
    """Registry from keyword arguments; underscores in names become dashes."""
    builder = TaskRegistryBuilder()
    for name, call in calls.items():
        builder.add(name.replace("_", "-"), call)
    return builder.build()


def labeled_payload(
    label: str,
    *,
    owner: str = ORG,
    repo: str = REPO,
    node_id: str = "I_kwDOissue1",
) -> dict[str, Any]:
    return {
        "action": "labeled",
        "label": {"name": label},
        "issue": {"node_id": node_id, "number": 42},
        "repository": {"name": repo, "owner": {"login": owner}},
    }


@pytest.fixture
def resource() -> Resource:
    return Resource.model_validate(RESOURCE_DOCUMENT)


@pytest.fixture
def github() -> MagicMock:
    """GitHub client double whose ``graphql`` is an AsyncMock."""
    client = MagicMock(name="GitHubClient")
    client.graphql = AsyncMock(return_value={})
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def make_context(resource: Resource) -> Callable[..., EventContext]:
    """Factory for EventContext; ``label`` builds a labeled payload."""

    def _make(
        event_type: str = "issues.labeled",
        *,
        label: str | None = None,
        payload: dict[str, Any] | None = None,
        github: Any = None,
        resources: Resource | None | str = "default",
    ) -> EventContext:
        if payload is None:
            payload = labeled_payload(label) if label is not None else {}
        return EventContext(
            event_type=event_type,
            payload=payload,
            github=github,
            resources=resource if resources == "default" else resources,
        )

    return _make


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``content`` to ``tmp_path/name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def registry_of() -> Callable[..., TaskRegistry]:
    """``registry_of(print_to_console=fn)`` registers ``fn`` as ``print-to-console``."""
    return make_registry


@pytest.fixture
def labeled() -> Callable[..., dict[str, Any]]:
    return labeled_payload
