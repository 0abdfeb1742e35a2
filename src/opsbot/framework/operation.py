"""Operation: a named group of tasks triggered by event types."""

from collections.abc import Iterable, Sequence
from typing import Any

from opsbot.framework.context import EventContext
from opsbot.framework.logging import get_logger, log_step
from opsbot.framework.result import TaskResult
from opsbot.framework.task import Task

log = get_logger(__name__)


class Operation:
    """
    Ordered tasks bound to a name and a set of trigger events.

    Read-only once built. ``run`` executes tasks strictly one after another
    and stops at the first task that did not complete: later tasks may
    depend on what earlier ones did (add the item, then set its field).
    """

    def __init__(self, name: str, events: Iterable[str], tasks: Sequence[Task]) -> None:
        self._name = name
        # dict keeps declaration order for display while collapsing duplicates
        self._events: tuple[str, ...] = tuple(dict.fromkeys(events))
        self._event_set = frozenset(self._events)
        self._tasks: tuple[Task, ...] = tuple(tasks)

    @property
    def name(self) -> str:
        return self._name

    @property
    def events(self) -> tuple[str, ...]:
        return self._events

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def task_names(self) -> list[str]:
        return [task.name for task in self._tasks]

    def matches(self, event_type: str) -> bool:
        """True iff ``event_type`` is one of this operation's trigger events."""
        return event_type in self._event_set

    async def run(self, context: EventContext) -> list[TaskResult]:
        """
        Invoke every task in declaration order.

        Returns the results of the tasks that ran. A skipped or failed task
        ends the run; the tasks after it are not invoked.
        """
        results: list[TaskResult] = []
        outputs: dict[str, Any] = {}

        with log_step("operation.run", operation=self._name) as timer:
            for task in self._tasks:
                result = await task.invoke(context, outputs)
                results.append(result)
                if not result.completed:
                    log.info(
                        "operation.stopped",
                        operation=self._name,
                        at_task=task.name,
                        status=result.status.value,
                        remaining=len(self._tasks) - len(results),
                    )
                    break
                outputs[task.name] = result.output

            timer.add_metric("tasks_run", len(results))

        return results

    def __repr__(self) -> str:
        return f"Operation(name={self._name!r}, events={list(self._events)!r}, tasks={self.task_names!r})"
