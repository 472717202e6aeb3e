"""Open-database session registry.

Each session holds an in-memory SQLite connection. The file on disk is a
whole-image export of that connection, written on ``create``, on ``close``
and after every successful write statement. Export failures are logged and
swallowed: the in-memory database stays authoritative for the life of the
process.
"""

from __future__ import annotations

import os
import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path

from litedesk.shared.exceptions import (
    DatabaseError,
    DatabaseFileNotFoundError,
    DatabaseNotOpenError,
    PersistenceError,
)
from litedesk.shared.logging import Logger, get_logger

from .introspect import introspect_connection
from .types import DatabaseInfo

PathLike = str | os.PathLike[str]


@dataclass(slots=True)
class Session:
    path: str
    connection: sqlite3.Connection


def _new_connection() -> sqlite3.Connection:
    # Autocommit so every statement is visible to serialize() immediately.
    connection = sqlite3.connect(":memory:", isolation_level=None, check_same_thread=False)
    return connection


_WAL_FORMAT_VERSION = 2
_ROLLBACK_FORMAT_VERSION = 1
# Header bytes 18 and 19 hold the file format write and read versions.
_FORMAT_VERSION_OFFSETS = (18, 19)


def _rollback_journal_image(data: bytes) -> bytes:
    """Rewrite a WAL-mode header so the image can live in memory."""
    if len(data) < 100 or any(data[offset] != _WAL_FORMAT_VERSION for offset in _FORMAT_VERSION_OFFSETS):
        return data
    image = bytearray(data)
    for offset in _FORMAT_VERSION_OFFSETS:
        image[offset] = _ROLLBACK_FORMAT_VERSION
    return bytes(image)


def _image_bytes(connection: sqlite3.Connection) -> bytes:
    # serialize() refuses a database that has never allocated a page.
    (page_count,) = connection.execute("PRAGMA page_count").fetchone()
    if not page_count:
        return b""
    return connection.serialize()


def _enable_foreign_keys(connection: sqlite3.Connection) -> None:
    connection.execute("PRAGMA foreign_keys = ON")


class SessionRegistry:
    """Maps database file paths to live in-memory engine handles."""

    def __init__(self, logger: Logger | None = None) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.RLock()
        self.logger = logger or get_logger()

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        with self._lock:
            return os.fspath(path) in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def open(self, path: PathLike) -> DatabaseInfo:
        """Load an existing database file into a new session.

        Re-opening a path that is already open returns a fresh snapshot of the
        live session and leaves the file alone.
        """
        key = os.fspath(path)
        with self._lock:
            session = self._sessions.get(key)
            if session is not None:
                return introspect_connection(key, session.connection)

            file_path = Path(key)
            if not file_path.is_file():
                raise DatabaseFileNotFoundError(f"File not found: {key}")

            data = file_path.read_bytes()
            connection = _new_connection()
            try:
                if data:
                    connection.deserialize(_rollback_journal_image(data))
                _enable_foreign_keys(connection)
                info = introspect_connection(key, connection)
            except sqlite3.DatabaseError as exc:
                connection.close()
                raise DatabaseError(f"Unable to open {key}: {exc}") from exc

            self._sessions[key] = Session(path=key, connection=connection)
            self.logger.debug(f"Opened {key} ({len(data)} bytes, {len(info.tables)} tables).")
            return info

    def create(self, path: PathLike) -> DatabaseInfo:
        """Create an empty database, write it to ``path`` and open a session."""
        key = os.fspath(path)
        with self._lock:
            Path(key).parent.mkdir(parents=True, exist_ok=True)
            connection = _new_connection()
            _enable_foreign_keys(connection)
            session = Session(path=key, connection=connection)
            try:
                self._export(session)
            except PersistenceError:
                connection.close()
                raise

            previous = self._sessions.pop(key, None)
            if previous is not None:
                previous.connection.close()
            self._sessions[key] = session
            self.logger.debug(f"Created {key}.")
            return introspect_connection(key, connection)

    def close(self, path: PathLike) -> None:
        """Persist and release the session for ``path``; no-op when not open."""
        key = os.fspath(path)
        with self._lock:
            session = self._sessions.pop(key, None)
        if session is None:
            return
        self._persist_session(session)
        session.connection.close()
        self.logger.debug(f"Closed {key}.")

    def close_all(self) -> None:
        """Close every session, carrying on past individual failures."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            try:
                self._persist_session(session)
                session.connection.close()
            except Exception as exc:  # noqa: BLE001 - shutdown path must reach every session
                self.logger.warning(f"Failed to close {session.path}: {exc}")

    def list_open(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._sessions)

    def get(self, path: PathLike) -> sqlite3.Connection:
        key = os.fspath(path)
        with self._lock:
            session = self._sessions.get(key)
        if session is None:
            raise DatabaseNotOpenError(f"Database not open: {key}")
        return session.connection

    def persist(self, path: PathLike) -> bool:
        """Export the in-memory image of ``path`` to disk.

        Returns False (after logging a warning) when the export fails.
        """
        key = os.fspath(path)
        with self._lock:
            session = self._sessions.get(key)
        if session is None:
            raise DatabaseNotOpenError(f"Database not open: {key}")
        return self._persist_session(session)

    # ------------------------------------------------------------------
    # Internal helpers

    def _persist_session(self, session: Session) -> bool:
        try:
            self._export(session)
        except PersistenceError as exc:
            self.logger.warning(str(exc))
            return False
        return True

    def _export(self, session: Session) -> None:
        try:
            data = _image_bytes(session.connection)
            Path(session.path).write_bytes(data)
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"Failed to save {session.path}: {exc}") from exc
