from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session

from pubdns.adapters.sqlalchemy import (
    NameserverIngestor,
    SqlAlchemyUnitOfWork,
    shutdown,
    start_mappers,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from pubdns.domain.model import Nameserver

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def sample_csv() -> Path:
    return DATA_DIR / "nameservers.test.csv"


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'nameservers.test.db'}", future=True)
    start_mappers()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def ingest(sqlite_engine: Engine) -> Callable[[Iterable[Nameserver]], int]:
    def run(records: Iterable[Nameserver]) -> int:
        with sqlite_engine.connect() as connection:
            return NameserverIngestor(connection).load(records)

    return run


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session = Session(sqlite_engine)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
