"""
Dispatch-scoped logging context.

The dispatcher pushes the delivery and event, the operation pushes its
name, the task pushes its own; every log line emitted underneath carries
those fields without them being passed down explicitly.

The context lives in a ``ContextVar``, so operations running concurrently
under ``asyncio.gather`` each see their own copy.
"""

from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass, replace
from typing import Any

import structlog


@dataclass(frozen=True)
class LogContext:
    """
    Fields attached to every log entry.

    Attributes:
        delivery_id: Webhook delivery id (X-GitHub-Delivery)
        event: Event type being dispatched, e.g. ``issues.labeled``
        operation: Operation currently running
        task: Task currently running
        span_id / parent_span_id / step: Set by ``log_step`` spans
    """

    delivery_id: str | None = None
    event: str | None = None
    operation: str | None = None
    task: str | None = None
    span_id: str | None = None
    parent_span_id: str | None = None
    step: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def merge(self, **kwargs: Any) -> "LogContext":
        """Copy with the given known, non-None fields replaced."""
        known = {k: v for k, v in kwargs.items() if v is not None and k in self.__dataclass_fields__}
        return replace(self, **known)


_EMPTY = LogContext()
_log_context: ContextVar[LogContext] = ContextVar("opsbot_log_context", default=_EMPTY)


def get_context() -> LogContext:
    return _log_context.get()


def clear_context() -> None:
    _log_context.set(_EMPTY)


class _ContextToken:
    def __init__(self, token: Token[LogContext]) -> None:
        self._token = token

    def restore(self) -> None:
        """Put back the context that was current before the push."""
        _log_context.reset(self._token)


def push_context(**kwargs: Any) -> _ContextToken:
    """
    Merge fields into the context until ``restore()`` is called.

    Usage:
        token = push_context(operation="roadmap-sync")
        try:
            await operation.run(ctx)
        finally:
            token.restore()
    """
    return _ContextToken(_log_context.set(get_context().merge(**kwargs)))


def add_context_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor: copy context fields into the entry; explicit keys win."""
    for key, value in get_context().to_dict().items():
        event_dict.setdefault(key, value)
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """structlog logger; entries pick up the dispatch context once logging is configured."""
    return structlog.get_logger(name)
