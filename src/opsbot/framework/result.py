"""Task Result — tagged envelope for task invocation outcomes.

Manifesto:
    A task call either did its job, had nothing to do, or broke.  Those
three outcomes are handled differently by the operation that runs the
task, so each gets its own tag instead of sharing one ``None``.

ARCHITECTURE
────────────
::

    TaskResult
      ├── .ok(output)              → COMPLETED: later tasks may run
      ├── .skip(reason)            → SKIPPED:   precondition not met, stop quietly
      ├── .fail(error)             → FAILED:    unexpected error, stop and log
      └── .from_value(any)         → coerce plain callable returns

    None            → SKIPPED
    TaskResult      → passed through
    anything else   → COMPLETED with that value as output

Example::

    async def close_stale(ctx, args):
        if not ctx.payload.get("issue"):
            return TaskResult.skip("payload has no issue")
        ...
        return TaskResult.ok(output=issue_id)

Tags:
    opsbot, framework, task-result, envelope

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TaskStatus(str, Enum):
    """Outcome tag of a single task invocation."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskResult:
    """
    Result from invoking a task.

    Attributes:
        status: Outcome tag
        output: Value returned by the call (COMPLETED only); later tasks in
            the same operation can reference it as ``${{ outputs.<task> }}``
        reason: Why the task was skipped or failed
        error: The unexpected exception (FAILED only)
        task: Display name of the task that produced this result
    """

    status: TaskStatus
    output: Any = None
    reason: str | None = None
    error: BaseException | None = None
    task: str | None = None

    @classmethod
    def ok(cls, output: Any = None) -> TaskResult:
        """Create a completed result."""
        return cls(status=TaskStatus.COMPLETED, output=output)

    @classmethod
    def skip(cls, reason: str = "no action taken") -> TaskResult:
        """Create a skipped (no-op) result."""
        return cls(status=TaskStatus.SKIPPED, reason=reason)

    @classmethod
    def fail(cls, error: BaseException | str) -> TaskResult:
        """Create a failed result from an exception or message."""
        if isinstance(error, BaseException):
            return cls(status=TaskStatus.FAILED, reason=str(error) or type(error).__name__, error=error)
        return cls(status=TaskStatus.FAILED, reason=error)

    @classmethod
    def from_value(cls, value: Any) -> TaskResult:
        """Coerce whatever a task call returned into a result."""
        if isinstance(value, TaskResult):
            return value
        if value is None:
            return cls.skip()
        return cls.ok(output=value)

    def for_task(self, name: str) -> TaskResult:
        """Return a copy stamped with the producing task's name."""
        return TaskResult(
            status=self.status,
            output=self.output,
            reason=self.reason,
            error=self.error,
            task=name,
        )

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    @property
    def skipped(self) -> bool:
        return self.status is TaskStatus.SKIPPED

    @property
    def failed(self) -> bool:
        return self.status is TaskStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logs and API responses (the exception becomes its type name)."""
        result: dict[str, Any] = {"task": self.task, "status": self.status.value}
        if self.reason is not None:
            result["reason"] = self.reason
        if self.error is not None:
            result["error_type"] = type(self.error).__name__
        return result
