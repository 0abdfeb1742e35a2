"""Tests for the resource config models."""

import pytest
from pydantic import ValidationError

from opsbot.core.errors import ConfigSchemaError
from opsbot.resources.models import Resource, load_resource

RESOURCE_YAML = """\
organizations:
  opensearch-project:
    repositories:
      - opensearch-build
    projects:
      206:
        nodeId: PVT_206
        fields:
          Roadmap:
            nodeId: PVTSSF_roadmap
            fieldType: SINGLE_SELECT
            options:
              - id: "1a"
                name: Releases
  other-org:
    projects: {}
"""


class TestLoadResource:
    def test_loads_yaml(self, write_config):
        resource = load_resource(write_config("resources.yml", RESOURCE_YAML))

        project = resource.get_project("opensearch-project/206")
        assert project is not None
        assert project.node_id == "PVT_206"
        assert project.fields["Roadmap"].option("Releases").id == "1a"

    def test_schema_error(self, write_config):
        path = write_config("resources.yml", "organizations:\n  org:\n    projects:\n      1:\n        fields: {}\n")

        with pytest.raises(ConfigSchemaError) as exc_info:
            load_resource(path)

        assert "nodeId" in exc_info.value.location


class TestResource:
    def test_get_project_lookup(self, resource):
        assert resource.get_project("opensearch-project/206") is not None
        assert resource.get_project("opensearch-project/999") is None
        assert resource.get_project("unknown-org/206") is None

    @pytest.mark.parametrize("value", ["opensearch-project", "opensearch-project/", "opensearch-project/abc", ""])
    def test_get_project_malformed(self, resource, value):
        assert resource.get_project(value) is None

    def test_contains_repository(self, resource):
        assert resource.contains_repository("opensearch-project", "opensearch-build")
        assert not resource.contains_repository("opensearch-project", "other-repo")
        assert not resource.contains_repository("someone-else", "opensearch-build")
        assert not resource.contains_repository(None, None)

    def test_empty_repository_list_covers_all(self):
        resource = Resource.model_validate({"organizations": {"org": {"projects": {}}}})
        assert resource.contains_repository("org", "anything")

    def test_is_frozen(self, resource):
        with pytest.raises(ValidationError):
            resource.organizations = {}

    def test_option_lookup_is_exact(self, resource):
        field = resource.get_project("opensearch-project/206").fields["Roadmap"]

        assert field.option("Releases").id == "opt-releases"
        assert field.option("releases") is None
