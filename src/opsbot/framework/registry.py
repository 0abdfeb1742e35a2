"""Task call registry: call name → callable.

Manifesto:
    Operation configs name their task calls as strings.  The registry is
    the closed set those strings may resolve to.  It is built once at
    startup, frozen, and handed explicitly to whatever materializes
    operations, so an unknown call fails before the first event arrives.

Tags:
    opsbot, framework, registry, task-call, lookup

Doc-Types:
    api-reference
"""

from collections.abc import Awaitable, Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Union

from opsbot.core.errors import UnknownTaskCallError
from opsbot.framework.logging import get_logger

if TYPE_CHECKING:
    from opsbot.framework.context import EventContext

logger = get_logger(__name__)

# (context, static args) -> result; sync callables are accepted too
TaskCall = Callable[["EventContext", Mapping[str, str]], Union[Awaitable[Any], Any]]


class TaskRegistry(Mapping[str, TaskCall]):
    """
    Immutable mapping from call name to task callable.

    Build it with :class:`TaskRegistryBuilder`; there is no way to add or
    remove entries afterwards.
    """

    def __init__(self, calls: Mapping[str, TaskCall] | None = None) -> None:
        self._calls: Mapping[str, TaskCall] = MappingProxyType(dict(calls or {}))

    def get_call(self, name: str) -> TaskCall:
        """Resolve a call name, raising UnknownTaskCallError if it is not registered."""
        try:
            return self._calls[name]
        except KeyError:
            raise UnknownTaskCallError(name, self.names()) from None

    def names(self) -> list[str]:
        """List all registered call names."""
        return sorted(self._calls)

    def __getitem__(self, name: str) -> TaskCall:
        return self._calls[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._calls)

    def __len__(self) -> int:
        return len(self._calls)

    def __repr__(self) -> str:
        return f"TaskRegistry({', '.join(self.names())})"


class TaskRegistryBuilder:
    """
    Collects task calls during startup wiring.

    Usage:
        builder = TaskRegistryBuilder()

        @builder.register("print-to-console")
        async def print_to_console(ctx, args):
            ...

        registry = builder.build()
    """

    def __init__(self) -> None:
        self._calls: dict[str, TaskCall] = {}

    def add(self, name: str, call: TaskCall) -> "TaskRegistryBuilder":
        """Register ``call`` under ``name``. Names are registered once."""
        if not name:
            raise ValueError("Task call name must not be empty")
        if name in self._calls:
            raise ValueError(f"Task call '{name}' is already registered")
        if not callable(call):
            raise TypeError(f"Task call '{name}' is not callable: {call!r}")
        self._calls[name] = call
        logger.debug("task_call_registered", name=name, call=getattr(call, "__qualname__", repr(call)))
        return self

    def register(self, name: str) -> Callable[[TaskCall], TaskCall]:
        """Decorator form of :meth:`add`; returns the function unchanged."""

        def decorator(fn: TaskCall) -> TaskCall:
            self.add(name, fn)
            return fn

        return decorator

    def build(self) -> TaskRegistry:
        """Freeze the collected calls into a registry."""
        registry = TaskRegistry(self._calls)
        logger.debug("task_registry_built", registered=len(registry))
        return registry
