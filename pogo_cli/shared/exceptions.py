"""Project-wide custom exceptions."""

from __future__ import annotations


class PogoError(Exception):
    """Base exception for the pogo CLI."""


class ConfigurationError(PogoError):
    """Raised when configuration loading or validation fails."""


class DatabaseError(PogoError):
    """Raised for database-related issues."""


class DatabaseConnectionError(DatabaseError):
    """Raised when the database cannot be reached at startup."""


class QueryError(DatabaseError):
    """Raised when the database rejects or fails a statement."""


class EmptyResultError(QueryError):
    """Raised when a statement produces no result set to describe."""


class OperationError(PogoError):
    """Raised for problems with user-defined operations."""


class OperationNotFound(OperationError):
    """Raised when a named operation is absent from the registry."""


class OperationDefinitionError(OperationError):
    """Raised when an operation file cannot be parsed or is invalid."""
