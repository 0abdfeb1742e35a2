"""Task: one bound task call with its static arguments."""

import inspect
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from opsbot.core.errors import PreconditionNotMetError
from opsbot.framework.context import EventContext
from opsbot.framework.logging import get_logger, push_context
from opsbot.framework.registry import TaskCall, TaskRegistry
from opsbot.framework.result import TaskResult

log = get_logger(__name__)

# ${{ outputs.<task name> }}
OUTPUT_REF = re.compile(r"\$\{\{\s*outputs\.(?P<name>[^}]+?)\s*\}\}")


class UnresolvedOutputError(LookupError):
    """An argument references an output no earlier task produced."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No output from task '{name}'")
        self.name = name


def resolve_args(args: Mapping[str, str], outputs: Mapping[str, Any]) -> dict[str, str]:
    """Substitute ``${{ outputs.<task> }}`` references with earlier task outputs."""

    def substitute(match: re.Match) -> str:
        name = match.group("name")
        if outputs.get(name) is None:
            raise UnresolvedOutputError(name)
        return str(outputs[name])

    return {key: OUTPUT_REF.sub(substitute, value) for key, value in args.items()}


class Task:
    """
    A task call bound to its static arguments.

    The call name is resolved against the registry in the constructor, so a
    misconfigured operation fails when it is built rather than when an
    event arrives.
    """

    def __init__(
        self,
        call: str,
        args: Mapping[str, str] | None,
        name: str | None,
        registry: TaskRegistry,
    ) -> None:
        self._call_name = call
        self._fn: TaskCall = registry.get_call(call)
        self._args: Mapping[str, str] = MappingProxyType(dict(args or {}))
        self._name = name or call

    @property
    def name(self) -> str:
        return self._name

    @property
    def call(self) -> str:
        return self._call_name

    @property
    def args(self) -> Mapping[str, str]:
        return self._args

    async def invoke(self, context: EventContext, outputs: Mapping[str, Any] | None = None) -> TaskResult:
        """
        Run the call with ``(context, args)`` and classify the outcome.

        Never raises: a precondition failure becomes a skipped result, any
        other exception a failed result.
        """
        token = push_context(task=self._name)
        try:
            try:
                args = resolve_args(self._args, outputs or {})
            except UnresolvedOutputError as e:
                log.info("task.skipped", call=self._call_name, reason=str(e))
                return TaskResult.skip(str(e)).for_task(self._name)

            try:
                value = self._fn(context, args)
                if inspect.isawaitable(value):
                    value = await value
            except PreconditionNotMetError as e:
                log.info("task.skipped", call=self._call_name, reason=e.message)
                return TaskResult.skip(e.message).for_task(self._name)
            except Exception as e:
                log.exception(
                    "task.failed",
                    call=self._call_name,
                    event_type=context.event_type,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return TaskResult.fail(e).for_task(self._name)

            result = TaskResult.from_value(value).for_task(self._name)
            if result.completed:
                log.info("task.completed", call=self._call_name)
            elif result.skipped:
                # the call logs its own reason
                log.debug("task.skipped", call=self._call_name, reason=result.reason)
            else:
                log.error("task.failed", call=self._call_name, reason=result.reason)
            return result
        finally:
            token.restore()

    def __repr__(self) -> str:
        return f"Task(name={self._name!r}, call={self._call_name!r}, args={dict(self._args)!r})"
