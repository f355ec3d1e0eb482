"""Query execution, schema introspection and operations for pogo."""

from .executor import execute
from .operations import OperationRegistry, list_operations, load_operations, run
from .schema import describe, describe_database, describe_table, get_foreign_keys_for_table
from .types import ColumnDescriptor, ExecutionContext, Operation, Result
from .values import render_value

__all__ = [
    "ColumnDescriptor",
    "ExecutionContext",
    "Operation",
    "OperationRegistry",
    "Result",
    "describe",
    "describe_database",
    "describe_table",
    "execute",
    "get_foreign_keys_for_table",
    "list_operations",
    "load_operations",
    "render_value",
    "run",
]
