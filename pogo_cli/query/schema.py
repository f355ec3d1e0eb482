"""Catalog queries behind ``pogo describe``."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from psycopg import sql

from pogo_cli.shared.exceptions import QueryError

from . import executor
from .types import ExecutionContext, Result

DATABASE_HEADER = ("SCHEMA", "TABLE NAME", "TYPE")
REFERENCES_HEADER = "REFERENCES"
NO_REFERENCE = ""

RELATION_KINDS: Mapping[str, str] = {
    "r": "table",
    "p": "table",
    "v": "view",
    "m": "materialized view",
    "i": "index",
    "I": "index",
    "S": "sequence",
    "s": "special",
    "f": "foreign table",
}

DESCRIBE_DATABASE_SQL = """
SELECT n.nspname::text AS schema_name,
       c.relname::text AS relation_name,
       c.relkind::text AS relation_kind
FROM pg_catalog.pg_class c
     LEFT JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
WHERE c.relkind IN ('r', 'p', 'v', 'm', 'S', 'f')
  AND n.nspname <> 'pg_catalog'
  AND n.nspname <> 'information_schema'
  AND n.nspname !~ '^pg_toast'
  AND pg_catalog.pg_table_is_visible(c.oid)
ORDER BY 1, 2;
"""

DESCRIBE_TABLE_SQL = """
SELECT table_name::text AS table_name,
       column_name::text AS column_name,
       data_type::text AS data_type
FROM information_schema.columns
WHERE table_name = {table}
ORDER BY ordinal_position;
"""

FOREIGN_KEYS_SQL = """
SELECT tc.table_name::text AS table_name,
       kcu.column_name::text AS column_name,
       ccu.table_name::text AS foreign_table_name,
       ccu.column_name::text AS foreign_column_name
FROM information_schema.table_constraints AS tc
     JOIN information_schema.key_column_usage AS kcu
       ON tc.constraint_name = kcu.constraint_name
      AND tc.table_schema = kcu.table_schema
     JOIN information_schema.constraint_column_usage AS ccu
       ON ccu.constraint_name = tc.constraint_name
      AND ccu.table_schema = tc.table_schema
WHERE tc.constraint_type = 'FOREIGN KEY'
  AND tc.table_name = {table};
"""


def describe(context: ExecutionContext, table_name: str | None = None) -> Result:
    """Describe one table, or the whole database when no table is given."""
    if table_name:
        return describe_table(context, table_name)
    return describe_database(context)


def describe_database(context: ExecutionContext) -> Result:
    """List visible relations outside the system schemas, by schema then name."""
    raw = executor.execute(context, DESCRIBE_DATABASE_SQL)
    schema_idx = column_index(raw.header, "schema_name")
    name_idx = column_index(raw.header, "relation_name")
    kind_idx = column_index(raw.header, "relation_kind")
    rows = tuple(
        (row[schema_idx], row[name_idx], RELATION_KINDS.get(row[kind_idx].strip(), ""))
        for row in raw.rows
    )
    return Result(header=DATABASE_HEADER, rows=rows)


def describe_table(context: ExecutionContext, table_name: str) -> Result:
    """Columns of ``table_name`` with a REFERENCES column for foreign keys."""
    columns = executor.execute(context, catalog_statement(context, DESCRIBE_TABLE_SQL, table_name))
    if not columns.rows:
        context.logger.warning(f"No columns found for table '{table_name}'.")

    references = foreign_key_map(get_foreign_keys_for_table(context, table_name))
    return merge_references(columns, references)


def get_foreign_keys_for_table(context: ExecutionContext, table_name: str) -> Result:
    """Foreign key columns of ``table_name`` and the columns they reference."""
    return executor.execute(context, catalog_statement(context, FOREIGN_KEYS_SQL, table_name))


def foreign_key_map(foreign_keys: Result) -> dict[str, str]:
    """Fold a foreign-key result into ``column_name -> "table(column)"``."""
    column_idx = column_index(foreign_keys.header, "column_name")
    table_idx = column_index(foreign_keys.header, "foreign_table_name")
    target_idx = column_index(foreign_keys.header, "foreign_column_name")

    mapping: dict[str, str] = {}
    for row in foreign_keys.rows:
        mapping[row[column_idx]] = f"{row[table_idx]}({row[target_idx]})"
    return mapping


def merge_references(columns: Result, references: Mapping[str, str]) -> Result:
    """Append a REFERENCES cell to every row; rows without a foreign key get ``""``."""
    name_idx = column_index(columns.header, "column_name")
    rows = tuple(
        (*row, references.get(row[name_idx], NO_REFERENCE))
        for row in columns.rows
    )
    return Result(header=(*columns.header, REFERENCES_HEADER), rows=rows, truncated=columns.truncated)


def column_index(header: Sequence[str], name: str) -> int:
    """Position of the header label for ``name``, ignoring a ``" (type)"`` suffix."""
    prefix = f"{name} ("
    for index, label in enumerate(header):
        if label == name or label.startswith(prefix):
            return index
    raise QueryError(f"Column '{name}' not found in result header: {', '.join(header)}")


def catalog_statement(context: ExecutionContext, template: str, table_name: str) -> str:
    """Inline ``table_name`` into ``template`` as a quoted literal.

    The statement is composed client side and sent as plain text, like any
    other statement the executor runs.
    """
    statement = sql.SQL(template).format(table=sql.Literal(table_name))
    return statement.as_string(context.connection)
