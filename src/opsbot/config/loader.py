"""Operation config loading: read → validate → materialize.

Manifesto:
    Loading is split in three explicit phases so each failure is reported
    at the right place with a precise message:

    1. ``read_config``      - bytes to an untyped document (not found / malformed)
    2. ``validate_config``  - document to a typed ``OperationSpec`` (schema)
    3. ``OperationConfig.init_operation`` - spec to ``Operation`` (unknown call)

    All three happen at startup. Nothing is deferred to dispatch time.

Tags:
    opsbot, config, loader, yaml, schema-validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from opsbot.config.schema import OperationSpec, TaskSpec
from opsbot.core.errors import ConfigNotFoundError, ConfigParseError, ConfigSchemaError, OpsbotError
from opsbot.framework.logging import get_logger
from opsbot.framework.operation import Operation
from opsbot.framework.registry import TaskRegistry
from opsbot.framework.task import Task

logger = get_logger(__name__)

CONFIG_SUFFIXES = (".yml", ".yaml", ".json")


def read_config(path: str | Path) -> dict[str, Any]:
    """
    Read a YAML or JSON document into a plain dict.

    Raises:
        ConfigNotFoundError: The file is missing or unreadable
        ConfigParseError: The content is not UTF-8, is malformed, or is not a mapping
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigNotFoundError(str(path), cause=e) from e

    try:
        content = raw.decode("utf-8")
        if path.suffix == ".json":
            document = json.loads(content)
        else:
            document = yaml.safe_load(content)
    except (UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigParseError(str(path), str(e), cause=e) from e

    if not isinstance(document, dict):
        kind = "empty" if document is None else type(document).__name__
        raise ConfigParseError(str(path), f"top level must be a mapping, got {kind}")

    return document


def _format_location(loc: Sequence[int | str]) -> str:
    return ".".join(str(part) for part in loc)


def validate_config(
    document: Any,
    schema: type[BaseModel] = OperationSpec,
    *,
    path: str | Path | None = None,
) -> Any:
    """
    Validate a document against ``schema`` and return the typed model.

    Raises:
        ConfigSchemaError: naming the first failing constraint
    """
    try:
        return schema.model_validate(document)
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigSchemaError(
            _format_location(first.get("loc", ())),
            first.get("msg", "invalid value"),
            path=str(path) if path is not None else None,
        ) from e


def _task_display_names(tasks: Sequence[TaskSpec]) -> list[str]:
    """Explicit names as given; unnamed tasks take their call name, numbered if it repeats."""
    names: list[str] = []
    taken = {task.name for task in tasks if task.name}
    for position, task in enumerate(tasks, start=1):
        if task.name:
            names.append(task.name)
            continue
        name = task.call
        if name in taken:
            name = f"{task.call}#{position}"
        suffix = 2
        while name in taken:
            name = f"{task.call}#{position}.{suffix}"
            suffix += 1
        taken.add(name)
        names.append(name)
    return names


class OperationConfig:
    """
    One operation config file, read and validated on construction.

    Usage:
        config = OperationConfig("configs/operations/roadmap.yml")
        operation = config.init_operation(registry)
    """

    def __init__(self, config_path: str | Path) -> None:
        self.config_path = Path(config_path)
        self.config_data = read_config(self.config_path)
        self.spec: OperationSpec = validate_config(self.config_data, OperationSpec, path=self.config_path)

    @classmethod
    def from_document(cls, document: dict[str, Any], source: str = "<document>") -> OperationConfig:
        """Build from an in-memory document (tests, API payloads)."""
        config = cls.__new__(cls)
        config.config_path = Path(source)
        config.config_data = document
        config.spec = validate_config(document, OperationSpec, path=source)
        return config

    def _init_tasks(self, registry: TaskRegistry) -> list[Task]:
        tasks = []
        for spec, name in zip(self.spec.tasks, _task_display_names(self.spec.tasks), strict=True):
            task = Task(spec.call, spec.args, name, registry)
            logger.info("config.task_setup", task=task.name, call=task.call)
            tasks.append(task)
        return tasks

    def init_operation(self, registry: TaskRegistry) -> Operation:
        """
        Materialize the operation, binding every task call.

        Raises:
            UnknownTaskCallError: A task's call is not registered
        """
        try:
            tasks = self._init_tasks(registry)
        except OpsbotError as e:
            e.with_context(config_path=str(self.config_path), operation=self.spec.name)
            raise
        operation = Operation(self.spec.name, self.spec.events, tasks)
        logger.info(
            "config.operation_setup",
            operation=operation.name,
            events=list(operation.events),
            tasks=operation.task_names,
        )
        return operation


def discover_config_files(path: str | Path) -> list[Path]:
    """A single file, or every config file in a directory in sorted name order."""
    path = Path(path)
    if path.is_dir():
        return sorted(p for p in path.iterdir() if p.is_file() and p.suffix in CONFIG_SUFFIXES)
    if not path.exists():
        raise ConfigNotFoundError(str(path))
    return [path]


def load_operations(path: str | Path, registry: TaskRegistry) -> list[Operation]:
    """
    Load every operation config under ``path`` in stable order.

    Raises:
        ConfigNotFoundError / ConfigParseError / ConfigSchemaError: bad document
        UnknownTaskCallError: a task names an unregistered call
    """
    operations: list[Operation] = []
    seen: dict[str, Path] = {}
    for config_path in discover_config_files(path):
        config = OperationConfig(config_path)
        name = config.spec.name
        if name in seen:
            raise ConfigSchemaError(
                "name",
                f"operation '{name}' is already defined in {seen[name]}",
                path=str(config_path),
            )
        seen[name] = config_path
        operations.append(config.init_operation(registry))

    logger.info("config.operations_loaded", path=str(path), count=len(operations))
    return operations
