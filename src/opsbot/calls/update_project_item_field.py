"""
update-github-project-v2-item-field

Update a field of an item that is already on a GitHub project (v2).

Arguments:
    itemId  : project item node id (usually ``${{ outputs.<add task> }}``)
    method  : how the new value is chosen; only ``label`` is supported.
              Adding the label ``Roadmap:Releases/Project Health`` sets the
              ``Roadmap`` field to the option ``Releases, Project Health``:
              the field is the text before the first ``:``, the value the
              text up to the next ``:``, and ``/`` in the value stands for
              ``, `` in the option name. Defaults to ``label``.
    project : ``<organization>/<project number>`` the item belongs to, e.g.
              ``opensearch-project/206``

Only ``*.labeled`` events carry a label, so only they are supported.
Requires the resource config.
"""

from __future__ import annotations

import secrets
from collections.abc import Mapping

from opsbot.calls.verification import verify_github, verify_project, verify_resource_config
from opsbot.framework.context import EventContext
from opsbot.framework.logging import get_logger
from opsbot.framework.result import TaskResult
from opsbot.resources.models import FieldOption, ProjectField

log = get_logger(__name__)

SINGLE_SELECT = "SINGLE_SELECT"

UPDATE_ITEM_FIELD_MUTATION = """
mutation UpdateItemField(
  $clientMutationId: String!, $projectId: ID!, $itemId: ID!, $fieldId: ID!, $optionId: String!
) {
  updateProjectV2ItemFieldValue(
    input: {
      clientMutationId: $clientMutationId,
      projectId: $projectId,
      itemId: $itemId,
      fieldId: $fieldId,
      value: { singleSelectOptionId: $optionId }
    }
  ) {
    projectV2Item {
      id
    }
  }
}
"""


def match_label_option(label: str, field: ProjectField | None) -> FieldOption | None:
    """Option of a single-select ``field`` named by the second ``:`` segment of ``label``."""
    if field is None or field.field_type != SINGLE_SELECT:
        return None
    parts = label.split(":")
    if len(parts) < 2 or not parts[1]:
        return None
    value = parts[1]
    return field.option(value) or field.option(value.replace("/", ", "))


async def update_github_project_v2_item_field(context: EventContext, args: Mapping[str, str]) -> TaskResult | None:
    resource = verify_resource_config(context)
    if resource is None:
        return None

    project = args.get("project", "")
    project_node = verify_project(resource, project)
    if project_node is None:
        return None

    label_name = context.label_name
    if not label_name:
        log.error("update_item_field.unsupported_event", reason="Only 'issues.labeled' event is supported on this call.")
        return None

    item_id = args.get("itemId", "")
    if not item_id:
        log.error("update_item_field.no_item_id", reason="No Item Node Id provided in parameter.")
        return None

    method = args.get("method") or "label"
    if method != "label":
        log.error("update_item_field.unsupported_method", method=method, reason="Only 'label' method is supported in this call at the moment.")
        return None

    field_name = label_name.split(":")[0]
    field = project_node.fields.get(field_name)
    option = match_label_option(label_name, field)
    if option is None:
        log.info("update_item_field.no_match", reason=f"No match found for {label_name} in project {project}")
        return TaskResult.skip(f"No match found for {label_name} in project {project}")

    if not verify_github(context):
        return None

    log.info("update_item_field.attempt", item_id=item_id, project=project, field=field_name, option=option.name)
    data = await context.github.graphql(
        UPDATE_ITEM_FIELD_MUTATION,
        {
            "clientMutationId": secrets.token_hex(20),
            "projectId": project_node.node_id,
            "itemId": item_id,
            "fieldId": field.node_id,
            "optionId": option.id,
        },
    )
    updated = ((data.get("updateProjectV2ItemFieldValue") or {}).get("projectV2Item") or {}).get("id", item_id)
    log.info("update_item_field.updated", item_id=updated, field=field_name, option=option.name)
    return TaskResult.ok(output=updated)
