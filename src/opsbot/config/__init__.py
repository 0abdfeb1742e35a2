"""Operation config documents: schema, reading, validation and materialization."""

from opsbot.config.loader import (
    OperationConfig,
    discover_config_files,
    load_operations,
    read_config,
    validate_config,
)
from opsbot.config.schema import OperationSpec, TaskSpec

__all__ = [
    "OperationSpec",
    "TaskSpec",
    "OperationConfig",
    "read_config",
    "validate_config",
    "discover_config_files",
    "load_operations",
]
