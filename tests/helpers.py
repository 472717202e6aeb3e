from __future__ import annotations

import sqlite3
from pathlib import Path


class StubLogger:
    def __init__(self) -> None:
        self.verbose = True
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def statement(self, sql: str) -> None:
        self.messages.append(("statement", sql))


def read_disk(path: Path, sql: str) -> list[tuple]:
    """Query an exported database file through an independent connection."""
    connection = sqlite3.connect(path)
    try:
        return connection.execute(sql).fetchall()
    finally:
        connection.close()
