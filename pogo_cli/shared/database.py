"""PostgreSQL connection helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import psycopg
import psycopg.rows

from .config import AppConfig
from .exceptions import DatabaseConnectionError

READ_ONLY_OPTIONS = "-c default_transaction_read_only=on"


def open_connection(config: AppConfig) -> psycopg.Connection:
    """Open a psycopg connection using the configured connection string."""
    settings = config.database
    kwargs: dict[str, object] = {
        "autocommit": True,
        "application_name": settings.application_name,
        "row_factory": psycopg.rows.tuple_row,
    }
    if settings.read_only:
        kwargs["options"] = READ_ONLY_OPTIONS
    try:
        connection = psycopg.connect(settings.connection_string, **kwargs)
    except psycopg.Error as exc:
        raise DatabaseConnectionError(f"Unable to connect to the database: {exc}") from exc
    # Statements are sent once per invocation, never prepared server-side.
    connection.prepare_threshold = None
    return connection


@contextmanager
def connect(config: AppConfig) -> Iterator[psycopg.Connection]:
    """Yield a connection for the configured database, closing it afterwards."""
    connection = open_connection(config)
    try:
        yield connection
    finally:
        connection.close()
