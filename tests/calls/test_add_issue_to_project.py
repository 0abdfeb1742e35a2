"""Tests for the add-issue-to-github-project-v2 call."""

import pytest

from opsbot.calls import default_registry
from opsbot.calls.add_issue_to_project import ADD_ITEM_MUTATION, add_issue_to_github_project_v2
from opsbot.framework.operation import Operation
from opsbot.framework.task import Task

ARGS = {"label": "Roadmap:Releases", "project": "opensearch-project/206"}


class TestAddIssue:
    @pytest.mark.asyncio
    async def test_adds_issue_and_returns_item_id(self, make_context, github):
        github.graphql.return_value = {"addProjectV2ItemById": {"item": {"id": "PVTI_new"}}}
        ctx = make_context(label="Roadmap:Releases", github=github)

        result = await add_issue_to_github_project_v2(ctx, ARGS)

        assert result.completed
        assert result.output == "PVTI_new"
        github.graphql.assert_awaited_once_with(
            ADD_ITEM_MUTATION,
            {"projectId": "PVT_kwDOBVjvKc4AcnXk", "contentId": "I_kwDOissue1"},
        )

    @pytest.mark.asyncio
    async def test_pull_request_payload(self, make_context, github, labeled):
        github.graphql.return_value = {"addProjectV2ItemById": {"item": {"id": "PVTI_pr"}}}
        payload = labeled("Roadmap:Releases")
        payload["pull_request"] = payload.pop("issue")

        result = await add_issue_to_github_project_v2(
            make_context("pull_request.labeled", payload=payload, github=github), ARGS
        )

        assert result.output == "PVTI_pr"

    @pytest.mark.asyncio
    async def test_other_label_skips(self, make_context, github):
        ctx = make_context(label="Roadmap:Security", github=github)

        result = await add_issue_to_github_project_v2(ctx, ARGS)

        assert result.skipped
        github.graphql.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_item_id_raises(self, make_context, github):
        github.graphql.return_value = {"addProjectV2ItemById": {"item": None}}
        ctx = make_context(label="Roadmap:Releases", github=github)

        with pytest.raises(ValueError, match="no item id"):
            await add_issue_to_github_project_v2(ctx, ARGS)

    @pytest.mark.asyncio
    async def test_payload_without_subject(self, make_context, github, labeled):
        payload = labeled("Roadmap:Releases")
        del payload["issue"]

        assert await add_issue_to_github_project_v2(make_context(payload=payload, github=github), ARGS) is None
        github.graphql.assert_not_awaited()


class TestAddThenUpdate:
    @pytest.mark.asyncio
    async def test_item_id_flows_into_update(self, make_context, github):
        github.graphql.side_effect = [
            {"addProjectV2ItemById": {"item": {"id": "PVTI_new"}}},
            {"updateProjectV2ItemFieldValue": {"projectV2Item": {"id": "PVTI_new"}}},
        ]
        registry = default_registry()
        operation = Operation(
            "Roadmap Releases",
            ["issues.labeled"],
            [
                Task("add-issue-to-github-project-v2", ARGS, "Add", registry),
                Task(
                    "update-github-project-v2-item-field",
                    {"itemId": "${{ outputs.Add }}", "project": ARGS["project"]},
                    "Update",
                    registry,
                ),
            ],
        )

        results = await operation.run(make_context(label="Roadmap:Releases", github=github))

        assert [r.completed for r in results] == [True, True]
        assert github.graphql.await_count == 2
        assert github.graphql.await_args_list[1].args[1]["itemId"] == "PVTI_new"

    @pytest.mark.asyncio
    async def test_label_mismatch_stops_before_update(self, make_context, github):
        registry = default_registry()
        operation = Operation(
            "Roadmap Releases",
            ["issues.labeled"],
            [
                Task("add-issue-to-github-project-v2", ARGS, "Add", registry),
                Task("update-github-project-v2-item-field", {"itemId": "${{ outputs.Add }}", "project": ARGS["project"]}, "Update", registry),
            ],
        )

        results = await operation.run(make_context(label="Roadmap:Security", github=github))

        assert len(results) == 1
        assert results[0].skipped
        github.graphql.assert_not_awaited()
