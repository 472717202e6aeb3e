from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from litedesk.core.service import DatabaseService
from tests.helpers import StubLogger


@pytest.fixture
def logger() -> StubLogger:
    return StubLogger()


@pytest.fixture
def service(logger: StubLogger) -> Iterator[DatabaseService]:
    with DatabaseService(logger=logger) as svc:  # type: ignore[arg-type]
        yield svc


@pytest.fixture
def db_path(tmp_path: Path, service: DatabaseService) -> Path:
    path = tmp_path / "test.db"
    service.create(path)
    return path
