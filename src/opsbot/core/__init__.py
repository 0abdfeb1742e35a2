"""Core primitives shared by every opsbot layer: errors and settings."""

from opsbot.core.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigSchemaError,
    ErrorCategory,
    ErrorContext,
    GitHubApiError,
    OpsbotError,
    PreconditionNotMetError,
    TaskError,
    TransientError,
    UnknownTaskCallError,
)

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
