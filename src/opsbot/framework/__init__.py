"""
opsbot framework - the operation/task dispatch engine.

This package provides:
- Task call registry (built once, immutable)
- Task and TaskResult (completed / skipped / failed)
- Operation (ordered tasks bound to trigger events)
- Dispatcher (event → matching operations)
- Structured logging with dispatch context
"""

from opsbot.framework.context import EventContext
from opsbot.framework.dispatcher import Dispatcher, OperationRun, OperationStatus
from opsbot.framework.operation import Operation
from opsbot.framework.registry import TaskCall, TaskRegistry, TaskRegistryBuilder
from opsbot.framework.result import TaskResult, TaskStatus
from opsbot.framework.task import Task, resolve_args

__all__ = [
    # Registry
    "TaskCall",
    "TaskRegistry",
    "TaskRegistryBuilder",
    # Tasks
    "Task",
    "TaskResult",
    "TaskStatus",
    "resolve_args",
    # Operations
    "Operation",
    "EventContext",
    # Dispatch
    "Dispatcher",
    "OperationRun",
    "OperationStatus",
]
