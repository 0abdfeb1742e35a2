"""
Structured error types for opsbot.

Every error raised by the bot carries a category, a retry hint, and a
structured context so it can be logged as a single structured event.

Manifesto:
    - **Typed Error Hierarchy:** Config errors, task errors, and API errors
      are distinct types because they are handled at distinct boundaries
    - **Fail fast at startup:** Config and registry errors are fatal before
      the first event is served
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                        OpsbotError                           │
        │          (category, retryable, context, cause)               │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  ConfigError              TaskError          TransientError  │
        │  (CONFIG)                 (TASK)             (NETWORK)       │
        │      │                        │                  │           │
        │  ConfigNotFoundError     PreconditionNotMet  GitHubApiError  │
        │  ConfigParseError                                            │
        │  ConfigSchemaError                                           │
        │  UnknownTaskCallError                                        │
        └─────────────────────────────────────────────────────────────┘

Usage:
    from opsbot.core.errors import ConfigSchemaError

    raise ConfigSchemaError("tasks.0.call: Field required").with_context(
        config_path="operations/roadmap.yml"
    )

Tags:
    error-handling, exception-hierarchy, opsbot-core

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and log routing."""

    # Infrastructure errors (usually transient)
    NETWORK = "NETWORK"           # Connection, timeout, DNS
    SOURCE = "SOURCE"             # Upstream API returned an error

    # Configuration errors (never retryable)
    CONFIG = "CONFIG"             # Missing, malformed or invalid config
    AUTH = "AUTH"                 # Missing or rejected token

    # Application errors
    TASK = "TASK"                 # Task precondition or execution failure
    DISPATCH = "DISPATCH"         # Operation routing failures

    # Internal errors
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only non-None fields are emitted by ``to_dict()``; anything without a
    dedicated field goes into ``metadata``.
    """

    # Dispatch context
    operation: str | None = None
    task: str | None = None
    event: str | None = None
    delivery_id: str | None = None

    # Config context
    config_path: str | None = None

    # Request context
    url: str | None = None
    http_status: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "task", "event", "delivery_id", "config_path", "url", "http_status"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class OpsbotError(Exception):
    """
    Base exception for all opsbot errors.

    Subclasses set ``default_category`` and ``default_retryable`` so call
    sites only pass a message (and optionally a cause).
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> OpsbotError:
        """
        Add context to this error (fluent API).

        Usage:
            raise GitHubApiError("Bad response").with_context(
                url="https://api.github.com/graphql", http_status=502
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIG ERRORS (fatal at startup, never retryable)
# =============================================================================


class ConfigError(OpsbotError):
    """Configuration could not be loaded or is invalid."""

    default_category = ErrorCategory.CONFIG


class ConfigNotFoundError(ConfigError):
    """The configuration location does not exist or cannot be read."""

    def __init__(self, path: str, *, cause: Exception | None = None):
        super().__init__(f"Config not found or unreadable: {path}", cause=cause)
        self.path = path
        self.context.config_path = path


class ConfigParseError(ConfigError):
    """The configuration content is not a well-formed document."""

    def __init__(self, path: str, reason: str, *, cause: Exception | None = None):
        super().__init__(f"Config {path} is malformed: {reason}", cause=cause)
        self.path = path
        self.reason = reason
        self.context.config_path = path


class ConfigSchemaError(ConfigError):
    """
    The configuration violates its schema.

    ``location`` is the dotted path of the first failing constraint
    (``tasks.0.args.project``), ``reason`` the constraint message.
    """

    def __init__(self, location: str, reason: str, *, path: str | None = None):
        where = f"{path}: " if path else ""
        super().__init__(f"{where}{location}: {reason}" if location else f"{where}{reason}")
        self.location = location
        self.reason = reason
        self.path = path
        self.context.config_path = path


class UnknownTaskCallError(ConfigError):
    """A task references a call name that is not in the registry."""

    def __init__(self, call: str, available: list[str] | None = None):
        names = ", ".join(available or []) or "(none)"
        super().__init__(f"Task call '{call}' is not registered. Available: {names}")
        self.call = call
        self.available = available or []


# =============================================================================
# TASK ERRORS
# =============================================================================


class TaskError(OpsbotError):
    """A task could not complete."""

    default_category = ErrorCategory.TASK


class PreconditionNotMetError(TaskError):
    """
    A task's business precondition does not hold.

    Expected and recoverable: the task boundary turns it into a skipped
    result rather than a failure.
    """


# =============================================================================
# TRANSIENT ERRORS
# =============================================================================


class TransientError(OpsbotError):
    """Temporary error that may succeed on retry (the bot itself never retries)."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class GitHubApiError(TransientError):
    """The GitHub GraphQL API call failed or returned errors."""

    default_category = ErrorCategory.SOURCE

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        errors: list[dict[str, Any]] | None = None,
        cause: Exception | None = None,
    ):
        # 4xx other than rate limiting will not fix themselves
        retryable = http_status is None or http_status >= 500 or http_status == 429
        super().__init__(message, retryable=retryable, cause=cause)
        self.http_status = http_status
        self.errors = errors or []
        self.context.http_status = http_status


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "OpsbotError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigSchemaError",
    "UnknownTaskCallError",
    "TaskError",
    "PreconditionNotMetError",
    "TransientError",
    "GitHubApiError",
]
