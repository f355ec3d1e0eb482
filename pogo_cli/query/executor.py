"""Statement execution and result decoding for pogo."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import psycopg

from pogo_cli.shared.exceptions import EmptyResultError, QueryError

from .types import ColumnDescriptor, ExecutionContext, Result
from .values import render_value


def execute(context: ExecutionContext, sql: str, *, limit: int | None = None) -> Result:
    """Run one statement verbatim and return its rendered result.

    The header is read from the cursor's result-set descriptor, so a query
    matching zero rows still reports its columns.
    """

    effective_limit = _normalise_limit(limit)
    context.logger.statement(sql)

    try:
        with context.connection.cursor() as cursor:
            # No parameter sequence: psycopg sends the text untouched, '%' included.
            cursor.execute(sql)
            if cursor.description is None:
                raise EmptyResultError("Statement did not return a result set; nothing to display.")
            columns = describe_columns(context.connection, cursor.description)
            records, truncated = _fetch_rows(cursor, effective_limit)
    except psycopg.Error as exc:
        raise QueryError(str(exc).strip() or exc.__class__.__name__) from exc

    context.logger.debug(f"Fetched {len(records)} row(s) across {len(columns)} column(s).")
    return build_result(columns, records, truncated=truncated)


def describe_columns(connection: Any, description: Sequence[Any]) -> list[ColumnDescriptor]:
    """Turn a DB-API cursor description into column descriptors."""
    return [
        ColumnDescriptor(name=column.name, declared_type=declared_type_name(connection, column.type_code))
        for column in description
    ]


def declared_type_name(connection: Any, type_code: int) -> str:
    """Resolve a type OID to its PostgreSQL name, e.g. 25 -> ``text``.

    OIDs missing from the connection's type registry (extension types,
    domains, enums) are reported by their decimal OID. The registry indexes
    each type under its array OID too, so arrays are spelled ``int4[]``.
    """
    info = connection.adapters.types.get(type_code)
    if info is None:
        return str(type_code)
    if type_code == info.array_oid:
        return f"{info.name}[]"
    return info.name


def build_result(
    columns: Sequence[ColumnDescriptor],
    records: Sequence[Sequence[Any]],
    *,
    truncated: bool = False,
) -> Result:
    header = tuple(column.label for column in columns)
    rows = tuple(
        tuple(render_value(column.declared_type, value) for column, value in zip(columns, record, strict=True))
        for record in records
    )
    return Result(header=header, rows=rows, truncated=truncated)


def _normalise_limit(limit: int | None) -> int | None:
    if limit is None or limit <= 0:
        return None
    return limit


def _fetch_rows(cursor: psycopg.Cursor, limit: int | None) -> tuple[list[Any], bool]:
    if limit is None:
        return list(cursor.fetchall()), False

    rows = list(cursor.fetchmany(limit + 1))
    truncated = len(rows) > limit
    return rows[:limit], truncated
