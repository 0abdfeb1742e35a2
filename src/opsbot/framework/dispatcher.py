"""
Dispatcher - routes an event to every matching operation.

Operations are isolated from each other: whatever happens inside one
operation (a skipped task, a failed task, an exception that escapes the
operation itself) is logged and recorded on that operation's run and never
stops the other matching operations. Nothing propagates back to the event
source.
"""

import asyncio
import traceback
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from opsbot.framework.context import EventContext
from opsbot.framework.logging import get_logger, push_context
from opsbot.framework.operation import Operation
from opsbot.framework.result import TaskResult, TaskStatus

log = get_logger(__name__)


class OperationStatus(str, Enum):
    """Outcome of one operation run."""

    COMPLETED = "completed"  # every task completed
    SKIPPED = "skipped"  # stopped at a task that had nothing to do
    FAILED = "failed"  # stopped at a failed task, or the operation raised


@dataclass
class OperationRun:
    """Record of one operation run within a dispatch."""

    id: str
    operation: str
    event_type: str
    status: OperationStatus
    started_at: datetime
    completed_at: datetime | None = None
    results: list[TaskResult] = field(default_factory=list)
    error: str | None = None

    @property
    def duration_seconds(self) -> float | None:
        """Duration in seconds if completed."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()


def _status_from_results(results: list[TaskResult]) -> OperationStatus:
    if not results or results[-1].status is TaskStatus.COMPLETED:
        return OperationStatus.COMPLETED
    if results[-1].status is TaskStatus.SKIPPED:
        return OperationStatus.SKIPPED
    return OperationStatus.FAILED


class Dispatcher:
    """
    Matches events to loaded operations and runs them.

    Operations are evaluated in load order. With ``concurrent=False`` (the
    default) matching operations run one after another in that order; with
    ``concurrent=True`` they run together under ``asyncio.gather``. Either
    way each operation runs its own tasks strictly in sequence.

    The operation list is an immutable tuple. ``dispatch`` takes a snapshot
    when it starts, so ``reload`` never changes the set of operations an
    in-flight dispatch is working through.
    """

    def __init__(self, operations: Iterable[Operation] = (), *, concurrent: bool = False) -> None:
        self._operations: tuple[Operation, ...] = tuple(operations)
        self._concurrent = concurrent
        self._reload_lock = asyncio.Lock()

    @property
    def operations(self) -> tuple[Operation, ...]:
        return self._operations

    def matching(self, event_type: str) -> list[Operation]:
        """Operations triggered by ``event_type``, in load order."""
        return [op for op in self._operations if op.matches(event_type)]

    async def reload(self, operations: Iterable[Operation]) -> None:
        """Replace the loaded operations; in-flight dispatches keep their snapshot."""
        new_operations = tuple(operations)
        async with self._reload_lock:
            old = self._operations
            self._operations = new_operations
        log.info(
            "dispatcher.reloaded",
            previous=[op.name for op in old],
            loaded=[op.name for op in new_operations],
        )

    async def dispatch(self, event_type: str, context: EventContext) -> list[OperationRun]:
        """
        Run every operation whose trigger set contains ``event_type``.

        Returns one run record per matching operation, in load order.
        """
        operations = self._operations
        matched = [op for op in operations if op.matches(event_type)]

        token = push_context(delivery_id=context.delivery_id, event=event_type)
        try:
            if not matched:
                log.debug("dispatch.no_match", loaded=len(operations))
                return []

            log.info("dispatch.matched", operations=[op.name for op in matched])

            if self._concurrent and len(matched) > 1:
                runs = await asyncio.gather(*(self._run_operation(op, event_type, context) for op in matched))
                runs = list(runs)
            else:
                runs = [await self._run_operation(op, event_type, context) for op in matched]

            log.info(
                "dispatch.summary",
                **{status.value: sum(1 for r in runs if r.status is status) for status in OperationStatus},
            )
            return runs
        finally:
            token.restore()

    async def _run_operation(self, operation: Operation, event_type: str, context: EventContext) -> OperationRun:
        run = OperationRun(
            id=str(uuid4()),
            operation=operation.name,
            event_type=event_type,
            status=OperationStatus.FAILED,
            started_at=datetime.now(UTC),
        )
        token = push_context(operation=operation.name)
        try:
            run.results = await operation.run(context)
            run.status = _status_from_results(run.results)
            if run.status is OperationStatus.FAILED:
                run.error = run.results[-1].reason
        except Exception as e:
            run.status = OperationStatus.FAILED
            run.error = str(e) or type(e).__name__
            log.error(
                "dispatch.operation_error",
                error_type=type(e).__name__,
                error_message=str(e),
                error_stack=traceback.format_exc(),
            )
        finally:
            run.completed_at = datetime.now(UTC)
            token.restore()

        log.info(
            "dispatch.operation_finished",
            operation=operation.name,
            status=run.status.value,
            tasks_run=len(run.results),
            duration_ms=round((run.duration_seconds or 0) * 1000, 2),
        )
        return run
