"""User-defined operations: loading, listing and running them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from pogo_cli.shared.exceptions import OperationDefinitionError, OperationNotFound

from . import executor
from .types import ExecutionContext, Operation, Result

OPERATION_SUFFIXES = (".yaml", ".yml")
LIST_HEADER = ("OPERATION NAME", "DESCRIPTION")


class OperationRegistry:
    """Read-only, ordered collection of operations keyed by exact name."""

    def __init__(self, operations: Iterable[Operation] = ()) -> None:
        self._operations: dict[str, Operation] = {}
        for operation in operations:
            if not operation.name:
                raise OperationDefinitionError("Operation names must not be empty.")
            if operation.name in self._operations:
                raise OperationDefinitionError(f"Operation '{operation.name}' is defined more than once.")
            self._operations[operation.name] = operation

    def get(self, name: str) -> Operation:
        try:
            return self._operations[name]
        except KeyError:
            available = ", ".join(self._operations)
            raise OperationNotFound(
                f"Operation '{name}' is not defined. Available operations: {available or 'none'}."
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)


def load_operations(directory: Path) -> OperationRegistry:
    """Load one operation per YAML file, in file-name order.

    A directory that does not exist yields an empty registry.
    """
    if not directory.is_dir():
        return OperationRegistry()

    files = sorted(
        entry for entry in directory.iterdir() if entry.is_file() and entry.suffix.lower() in OPERATION_SUFFIXES
    )
    return OperationRegistry(_load_operation_file(path) for path in files)


def run(context: ExecutionContext, operation_name: str, *, limit: int | None = None) -> Result:
    """Execute the stored command of a named operation verbatim."""
    operation = context.operations.get(operation_name)
    context.logger.debug(f"Running operation '{operation.name}'.")
    return executor.execute(context, operation.command, limit=limit)


def list_operations(registry: OperationRegistry) -> Result:
    """One row per operation, in load order."""
    rows = tuple((operation.name, operation.description) for operation in registry)
    return Result(header=LIST_HEADER, rows=rows)


def _load_operation_file(path: Path) -> Operation:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise OperationDefinitionError(f"Unable to read operation file {path}: {exc}") from exc
    return _parse_operation(data, source=path)


def _parse_operation(entry: Any, *, source: Path) -> Operation:
    if not isinstance(entry, Mapping):
        raise OperationDefinitionError(f"Operation file {source} must define a mapping.")

    try:
        name = str(entry["name"]).strip()
        command = str(entry["command"])
    except KeyError as exc:
        raise OperationDefinitionError(f"Operation file {source} is missing required field {exc}.") from exc

    if not name:
        raise OperationDefinitionError(f"Operation file {source} has an empty name.")

    description = str(entry.get("description") or "")
    return Operation(name=name, description=description, command=command)
