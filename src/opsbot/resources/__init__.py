"""Resource config: read-only organization/project/field lookup."""

from opsbot.resources.models import FieldOption, Organization, Project, ProjectField, Resource, load_resource

__all__ = [
    "Resource",
    "Organization",
    "Project",
    "ProjectField",
    "FieldOption",
    "load_resource",
]
