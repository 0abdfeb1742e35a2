"""Precondition checks shared by the GitHub project calls.

Each check logs why it failed and returns None, so a call can write
``if project is None: return None`` and let the operation stop quietly.
"""

from __future__ import annotations

from opsbot.framework.context import EventContext
from opsbot.framework.logging import get_logger
from opsbot.resources.models import Project, Resource

log = get_logger(__name__)


def verify_resource_config(context: EventContext) -> Resource | None:
    """Resource config is loaded and lists the repository the event came from."""
    resource = context.resources
    if resource is None:
        log.error("verify.no_resource_config", reason="resource config is not loaded")
        return None

    owner, repo = context.repository_owner, context.repository_name
    if not resource.contains_repository(owner, repo):
        log.error(
            "verify.repository_not_in_resource",
            reason=f"Repository {owner}/{repo} is not defined in resource config!",
        )
        return None
    return resource


def verify_project(resource: Resource, project: str) -> Project | None:
    """``<organization>/<number>`` names a project in the resource config."""
    node = resource.get_project(project)
    if node is None:
        org, _, number = project.partition("/")
        log.error(
            "verify.project_not_in_resource",
            reason=f"Project {number or '?'} in organization {org or '?'} is not defined in resource config!",
        )
    return node


def verify_github(context: EventContext) -> bool:
    """A GraphQL client is available."""
    if context.github is None:
        log.error("verify.no_github_client", reason="no GitHub client configured (missing token?)")
        return False
    return True
