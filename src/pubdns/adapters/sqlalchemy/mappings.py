"""SQLAlchemy table, indexes and imperative mapping for nameserver records."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import Final

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)

from pubdns.domain.model import MIN_RELIABILITY, Nameserver

log = logging.getLogger(__name__)

NAMESERVER_TABLE_NAME: Final[str] = "nameservers"


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()

nameserver_table = Table(
    NAMESERVER_TABLE_NAME,
    mapper_registry.metadata,
    Column("ip", String(45), key="ip_address", primary_key=True),
    Column("name", Text, nullable=False, default=""),
    Column("country", String(2), nullable=False, default=""),
    Column("city", Text, nullable=False, default=""),
    Column("version", Text, nullable=False, default=""),
    Column("error", Text, nullable=False, default=""),
    Column("dnssec", Boolean, nullable=False, default=False),
    Column("reliability", Float, nullable=False, default=MIN_RELIABILITY),
    Column("checked_at", UTCDateTime, nullable=True),
    Column("created_at", UTCDateTime, nullable=True),
)

# Created explicitly after the table so a failure is reported on its own.
NAMESERVER_INDEXES: Final[tuple[Index, ...]] = (
    Index("nameservers_country_index", nameserver_table.c.country),
    Index(
        "nameservers_country_reliability_index",
        nameserver_table.c.country,
        nameserver_table.c.reliability,
    ),
    Index("nameservers_reliability_index", nameserver_table.c.reliability),
)


@cache
def start_mappers() -> orm.registry:
    """Map ``Nameserver`` onto the ``nameservers`` table (once per process)."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(Nameserver, nameserver_table)
    return mapper_registry
