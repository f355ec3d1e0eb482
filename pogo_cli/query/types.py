"""Data structures shared across pogo query modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pogo_cli.shared.logging import Logger

if TYPE_CHECKING:  # pragma: no cover - import only for static type checking
    from .operations import OperationRegistry


@dataclass(frozen=True, slots=True)
class Result:
    """Flat tabular result handed to the presentation layer.

    Every row carries exactly ``len(header)`` display strings.
    """

    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    truncated: bool = False

    def __post_init__(self) -> None:
        width = len(self.header)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} cells but the header has {width} columns."
                )


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """Name and declared type of one result column."""

    name: str
    declared_type: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.declared_type})"


@dataclass(frozen=True, slots=True)
class Operation:
    """A named SQL command loaded from the operations directory."""

    name: str
    description: str
    command: str


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """Collaborators every core operation works against."""

    connection: Any  # psycopg.Connection, or anything exposing cursor() and adapters
    operations: OperationRegistry
    logger: Logger
