"""Project-wide custom exceptions."""

from __future__ import annotations


class LiteDeskError(Exception):
    """Base exception for the litedesk toolkit."""


class ConfigurationError(LiteDeskError):
    """Raised when configuration loading or validation fails."""


class DatabaseError(LiteDeskError):
    """Raised for database-related issues."""


class DatabaseFileNotFoundError(DatabaseError):
    """Raised when opening a database file that does not exist."""


class DatabaseNotOpenError(DatabaseError):
    """Raised when an operation targets a path with no open session."""


class PersistenceError(DatabaseError):
    """Raised when exporting the in-memory image to disk fails."""


class DDLError(LiteDeskError):
    """Raised when DDL text cannot be generated."""


class UnknownOperationError(DDLError):
    """Raised when the DDL generator receives an unrecognised operation tag."""


class PayloadError(DDLError):
    """Raised when a DDL payload is missing required fields."""
