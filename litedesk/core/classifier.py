"""Coarse statement classification based on the leading keyword."""

from __future__ import annotations

from enum import Enum

READ_ONLY_PREFIXES = ("SELECT", "PRAGMA", "EXPLAIN")
SCHEMA_PREFIXES = ("CREATE", "ALTER", "DROP")


class StatementKind(Enum):
    READ_ONLY = "read_only"
    SCHEMA_DEFINING = "schema_defining"
    MUTATING = "mutating"


def classify(statement: str) -> StatementKind:
    """Return the kind of ``statement``; anything unrecognised is mutating."""
    upper = statement.lstrip().upper()
    if upper.startswith(READ_ONLY_PREFIXES):
        return StatementKind.READ_ONLY
    if upper.startswith(SCHEMA_PREFIXES):
        return StatementKind.SCHEMA_DEFINING
    return StatementKind.MUTATING
