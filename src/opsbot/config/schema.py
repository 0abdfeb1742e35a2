"""Pydantic models for operation config documents.

Usage::

    from opsbot.config.schema import OperationSpec

    spec = OperationSpec.model_validate(document)

Example YAML::

    name: Roadmap Sync
    events:
      - issues.labeled
    tasks:
      - name: Add Issue To Roadmap
        call: add-issue-to-github-project-v2
        args:
          label: Roadmap:Releases
          project: opensearch-project/206
      - name: Set Roadmap Field
        call: update-github-project-v2-item-field
        args:
          itemId: ${{ outputs.Add Issue To Roadmap }}
          method: label
          project: opensearch-project/206

Validation checks the shape of the document only. Whether ``call`` names a
registered task call is checked when the operation is materialized.

Tags:
    opsbot, config, yaml, declarative, schema

Doc-Types:
    api-reference
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator

EVENT_PATTERN = re.compile(r"^[a-z0-9_]+(\.[a-z0-9_]+)?$")


class TaskSpec(BaseModel):
    """One task entry: which call to run and with what arguments."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr | None = Field(default=None, description="Display name (defaults to the call name)")
    call: StrictStr = Field(..., min_length=1, description="Registered task call name")
    args: dict[StrictStr, StrictStr] = Field(..., description="Static string arguments for the call")


class OperationSpec(BaseModel):
    """A complete operation config document."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(..., min_length=1, description="Operation name")
    events: list[StrictStr] = Field(..., min_length=1, description="Trigger event types")
    tasks: list[TaskSpec] = Field(..., description="Tasks in execution order")

    @field_validator("events")
    @classmethod
    def validate_event_format(cls, v: list[str]) -> list[str]:
        """Each event is ``<category>`` or ``<category>.<action>``."""
        for event in v:
            if not EVENT_PATTERN.match(event):
                raise ValueError(f"'{event}' is not an event type like 'issues.labeled'")
        return v

    @model_validator(mode="after")
    def validate_unique_task_names(self) -> OperationSpec:
        """Explicit task names are unique; they key task outputs."""
        names = [task.name for task in self.tasks if task.name]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate task names: {duplicates}")
        return self

    @property
    def task_count(self) -> int:
        return len(self.tasks)
