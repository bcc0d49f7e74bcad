"""SQLAlchemy adapter package for pubdns."""

from __future__ import annotations

from .ingest import NameserverIngestor
from .mappings import NAMESERVER_INDEXES, mapper_registry, nameserver_table, start_mappers
from .repositories import SqlAlchemyNameserverRepository
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "NAMESERVER_INDEXES",
    "NameserverIngestor",
    "SqlAlchemyNameserverRepository",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "nameserver_table",
    "shutdown",
    "start_mappers",
    "startup",
]
