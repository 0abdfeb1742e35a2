"""
Logging configuration.

Provides a single entry point for configuring structured logging.

Configuration is read from arguments, falling back to environment variables:
- OPSBOT_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: INFO)
- OPSBOT_LOG_FORMAT: json | console (default: console)
- OPSBOT_LOG_OPERATION_DEBUG: comma-separated operation names for verbose debug

Usage:
    from opsbot.framework.logging import configure_logging
    configure_logging()

    # Or with explicit settings
    configure_logging(level="DEBUG", format="json")
"""

import logging
import os
import sys
from typing import Any, Literal

import structlog
from structlog.types import Processor

from opsbot.framework.logging.context import add_context_processor, get_context

_configured = False


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
    format: Literal["json", "console"] | None = None,
    operation_debug: list[str] | None = None,
    force: bool = False,
) -> None:
    """
    Configure structured logging for the process.

    Call once at startup (CLI entry, server startup). Subsequent calls are
    no-ops unless force=True.

    Args:
        level: Log level (overrides OPSBOT_LOG_LEVEL)
        format: Output format (overrides OPSBOT_LOG_FORMAT)
        operation_debug: Operation names that always log at DEBUG
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    log_level = (level or os.environ.get("OPSBOT_LOG_LEVEL", "INFO")).upper()
    log_format = (format or os.environ.get("OPSBOT_LOG_FORMAT", "console")).lower()

    debug_operations = operation_debug
    if debug_operations is None:
        env_operations = os.environ.get("OPSBOT_LOG_OPERATION_DEBUG", "")
        debug_operations = [p.strip() for p in env_operations.split(",") if p.strip()]

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_processor,
        structlog.processors.format_exc_info,
        structlog.processors.StackInfoRenderer(),
    ]

    if debug_operations:
        processors.insert(0, _make_operation_filter(debug_operations, log_level))
    else:
        processors.insert(0, structlog.stdlib.filter_by_level)

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # The operation filter does its own level check, so stdlib must let DEBUG through
    stdlib_level = "DEBUG" if debug_operations else log_level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, stdlib_level),
        force=True,
    )
    logging.getLogger("opsbot").setLevel(getattr(logging, stdlib_level))
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True


def _make_operation_filter(debug_operations: list[str], default_level: str):
    """
    Create a processor that enables DEBUG for specific operations.

    For listed operations, always allow DEBUG. For others, use the default level.
    """
    default_level_num = getattr(logging, default_level)

    def operation_debug_filter(
        logger: Any,
        method_name: str,
        event_dict: dict,
    ) -> dict:
        operation = event_dict.get("operation")
        if operation is None:
            operation = get_context().operation

        level = event_dict.get("level", method_name)
        level_num = getattr(logging, level.upper(), logging.DEBUG)

        if operation and operation in debug_operations:
            return event_dict

        if level_num < default_level_num:
            raise structlog.DropEvent

        return event_dict

    return operation_debug_filter