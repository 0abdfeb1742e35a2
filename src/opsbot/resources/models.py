"""Resource config: organizations, repositories and project boards.

A read-only lookup the task calls consult to turn human names (a project
``org/206``, a field ``Roadmap``, an option ``Releases``) into GraphQL node
ids. It is loaded at startup and never mutated at dispatch time.

Example YAML::

    organizations:
      opensearch-project:
        repositories:
          - OpenSearch
          - opensearch-build
        projects:
          206:
            nodeId: PVT_kwDOBVYtO84AP0wJ
            fields:
              Roadmap:
                nodeId: PVTSSF_lADOBVYtO84AP0wJzgJw4nE
                fieldType: SINGLE_SELECT
                options:
                  - id: 2d3b7a54
                    name: Releases
                  - id: 9bc52e30
                    name: Project Health
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from opsbot.config.loader import read_config, validate_config


class FieldOption(BaseModel):
    """One option of a single-select field."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class ProjectField(BaseModel):
    """A project field definition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node_id: str = Field(..., alias="nodeId")
    field_type: str = Field(..., alias="fieldType")
    options: tuple[FieldOption, ...] = ()

    def option(self, name: str) -> FieldOption | None:
        """Option by exact name, or None."""
        for option in self.options:
            if option.name == name:
                return option
        return None


class Project(BaseModel):
    """A GitHub Projects (v2) board."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node_id: str = Field(..., alias="nodeId")
    fields: dict[str, ProjectField] = Field(default_factory=dict)


class Organization(BaseModel):
    """An organization with the repositories the bot serves and its projects."""

    model_config = ConfigDict(frozen=True)

    repositories: tuple[str, ...] = ()
    projects: dict[int, Project] = Field(default_factory=dict)


class Resource(BaseModel):
    """Root of the resource config."""

    model_config = ConfigDict(frozen=True)

    organizations: dict[str, Organization] = Field(default_factory=dict)

    def get_project(self, project: str) -> Project | None:
        """Look up ``<organization>/<project number>``; None if absent or malformed."""
        org_name, _, number = project.partition("/")
        if not number.isdigit():
            return None
        org = self.organizations.get(org_name)
        if org is None:
            return None
        return org.projects.get(int(number))

    def contains_repository(self, owner: str | None, repo: str | None) -> bool:
        """True if ``owner/repo`` is listed. An organization with no repository list covers all its repos."""
        if not owner or not repo:
            return False
        org = self.organizations.get(owner)
        if org is None:
            return False
        return not org.repositories or repo in org.repositories


def load_resource(path: str | Path) -> Resource:
    """
    Read and validate a resource config file.

    Raises:
        ConfigNotFoundError / ConfigParseError / ConfigSchemaError
    """
    return validate_config(read_config(path), Resource, path=path)
