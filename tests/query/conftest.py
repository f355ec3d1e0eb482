"""Shared pytest fixtures for pogo query tests.

The database is replaced by ``FakeConnection``: it answers statements with
canned column descriptors and rows, records every statement it receives, and
resolves type OIDs through psycopg's real global type registry so declared
type names match what a live server would report.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import psycopg
import pytest

from pogo_cli.query.operations import OperationRegistry
from pogo_cli.query.types import ExecutionContext, Operation
from pogo_cli.shared.logging import get_logger


def oid(type_name: str) -> int:
    """OID of a built-in PostgreSQL type, e.g. ``oid("int4") == 23``."""
    return psycopg.adapters.types[type_name].oid


def array_oid(type_name: str) -> int:
    """OID of the array type over a built-in type, e.g. ``array_oid("int4") == 1007``."""
    return psycopg.adapters.types[type_name].array_oid


@dataclass(frozen=True)
class FakeColumn:
    name: str
    type_code: int


@dataclass
class CannedResponse:
    columns: Sequence[FakeColumn] | None
    rows: Sequence[tuple[Any, ...]] = ()
    error: Exception | None = None


class FakeCursor:
    def __init__(self, connection: FakeConnection) -> None:
        self._connection = connection
        self._rows: list[tuple[Any, ...]] = []
        self.description: Sequence[FakeColumn] | None = None

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def execute(self, query: str, params: object = None) -> None:
        self._connection.statements.append(query)
        self._connection.params.append(params)
        response = self._connection.response_for(query)
        if response.error is not None:
            raise response.error
        self.description = response.columns
        self._rows = list(response.rows)

    def fetchall(self) -> list[tuple[Any, ...]]:
        rows, self._rows = self._rows, []
        return rows

    def fetchmany(self, size: int) -> list[tuple[Any, ...]]:
        rows, self._rows = self._rows[:size], self._rows[size:]
        return rows


@dataclass
class FakeConnection:
    """Minimal stand-in for ``psycopg.Connection``."""

    adapters: Any = field(default_factory=lambda: psycopg.adapters)
    statements: list[str] = field(default_factory=list)
    params: list[object] = field(default_factory=list)
    _responses: list[tuple[str, CannedResponse]] = field(default_factory=list)

    @property
    def connection(self) -> None:
        # No libpq connection behind the fake: psycopg composes SQL as UTF-8.
        return None

    def respond(
        self,
        fragment: str,
        columns: Sequence[tuple[str, str]] | None,
        rows: Sequence[tuple[Any, ...]] = (),
    ) -> None:
        """Answer statements containing ``fragment`` with the given columns and rows."""
        descriptors = None
        if columns is not None:
            descriptors = [FakeColumn(name, oid(type_name)) for name, type_name in columns]
        self._responses.append((fragment, CannedResponse(columns=descriptors, rows=rows)))

    def respond_raw(self, fragment: str, columns: Sequence[FakeColumn], rows: Sequence[tuple[Any, ...]]) -> None:
        self._responses.append((fragment, CannedResponse(columns=columns, rows=rows)))

    def fail(self, fragment: str, error: Exception) -> None:
        self._responses.append((fragment, CannedResponse(columns=None, error=error)))

    def response_for(self, query: str) -> CannedResponse:
        for fragment, response in self._responses:
            if fragment in query:
                return response
        raise AssertionError(f"Unexpected statement sent to fake database: {query!r}")

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        return None


@pytest.fixture()
def fake_connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture()
def make_context(fake_connection: FakeConnection) -> Callable[..., ExecutionContext]:
    """Build an ExecutionContext over the fake connection."""

    def _builder(operations: Sequence[Operation] = ()) -> ExecutionContext:
        return ExecutionContext(
            connection=fake_connection,
            operations=OperationRegistry(operations),
            logger=get_logger(verbose=False),
        )

    return _builder


@pytest.fixture()
def context(make_context: Callable[..., ExecutionContext]) -> ExecutionContext:
    return make_context()
