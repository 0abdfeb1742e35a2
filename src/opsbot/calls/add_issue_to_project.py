"""
add-issue-to-github-project-v2

Add the issue (or pull request) of a ``*.labeled`` event to a GitHub
project (v2) when the applied label is the configured one.

Arguments:
    label   : label that triggers the add, e.g. ``Roadmap:Releases``
    project : ``<organization>/<project number>``

Output: the node id of the new project item, for a later
``update-github-project-v2-item-field`` task to reference.
"""

from __future__ import annotations

from collections.abc import Mapping

from opsbot.calls.verification import verify_github, verify_project, verify_resource_config
from opsbot.framework.context import EventContext
from opsbot.framework.logging import get_logger
from opsbot.framework.result import TaskResult

log = get_logger(__name__)

ADD_ITEM_MUTATION = """
mutation AddItem($projectId: ID!, $contentId: ID!) {
  addProjectV2ItemById(input: { projectId: $projectId, contentId: $contentId }) {
    item {
      id
    }
  }
}
"""


async def add_issue_to_github_project_v2(context: EventContext, args: Mapping[str, str]) -> TaskResult | None:
    resource = verify_resource_config(context)
    if resource is None:
        return None

    project = args.get("project", "")
    project_node = verify_project(resource, project)
    if project_node is None:
        return None

    label_name = context.label_name
    if not label_name:
        log.error("add_issue.unsupported_event", reason="Only 'issues.labeled' event is supported on this call.")
        return None

    wanted = args.get("label", "")
    if label_name != wanted:
        log.info("add_issue.label_mismatch", label=label_name, wanted=wanted)
        return TaskResult.skip(f"Label {label_name} is not {wanted}")

    content_id = context.issue_node_id
    if not content_id:
        log.error("add_issue.no_content", reason="Payload has no issue or pull request node id.")
        return None

    if not verify_github(context):
        return None

    log.info("add_issue.attempt", content_id=content_id, project=project)
    data = await context.github.graphql(
        ADD_ITEM_MUTATION,
        {"projectId": project_node.node_id, "contentId": content_id},
    )
    item_id = ((data.get("addProjectV2ItemById") or {}).get("item") or {}).get("id")
    if not item_id:
        raise ValueError(f"addProjectV2ItemById returned no item id for {content_id}")

    log.info("add_issue.added", item_id=item_id, project=project)
    return TaskResult.ok(output=item_id)
