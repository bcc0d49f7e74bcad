"""Full-replace bulk load of nameserver records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable

from pubdns.domain.errors import IngestStage, SchemaError, TransactionError

from .mappings import NAMESERVER_INDEXES, nameserver_table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Connection, RootTransaction
    from sqlalchemy.sql.dml import Insert

    from pubdns.domain.model import Nameserver

log = getLogger(__name__)

_CONFLICT_TOLERANT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _record_params(record: Nameserver) -> dict[str, Any]:
    return {column.key: getattr(record, column.key) for column in nameserver_table.columns}


class NameserverIngestor:
    """Replace the stored dataset with ``records`` over one connection.

    Every call to :meth:`load` drops and recreates the table: ingestion is
    "replace the entire dataset", never "append". The connection must not be
    inside a transaction when ``load`` is called.

    With ``skip_conflicts`` a record whose address was already inserted in the
    same batch is ignored instead of aborting the load; the returned count then
    only includes rows that were actually written.
    """

    def __init__(self, connection: Connection, *, skip_conflicts: bool = False) -> None:
        self.connection = connection
        self.skip_conflicts = skip_conflicts

    def load(self, records: Iterable[Nameserver]) -> int:
        self.reset_schema()
        self.create_indexes()
        return self.insert_records(records)

    def reset_schema(self) -> None:
        """Drop the table if present and create it again, without indexes."""

        try:
            with self.connection.begin():
                nameserver_table.drop(self.connection, checkfirst=True)
                self.connection.execute(CreateTable(nameserver_table))
        except SQLAlchemyError as exc:
            log.error(f"Could not recreate {nameserver_table.name}: {exc}")
            raise SchemaError(
                f"Could not recreate table {nameserver_table.name}",
                stage=IngestStage.CREATE_TABLE,
            ) from exc

    def create_indexes(self) -> None:
        try:
            with self.connection.begin():
                for index in NAMESERVER_INDEXES:
                    index.create(self.connection)
        except SQLAlchemyError as exc:
            log.error(f"Could not index {nameserver_table.name}: {exc}")
            raise SchemaError(
                f"Could not create indexes on {nameserver_table.name}",
                stage=IngestStage.CREATE_INDEX,
            ) from exc

    def insert_records(self, records: Iterable[Nameserver]) -> int:
        """Insert ``records`` into the existing table in a single transaction.

        Any failure rolls the whole batch back; nothing is committed unless
        every record was handed to the database.
        """

        try:
            transaction = self.connection.begin()
        except SQLAlchemyError as exc:
            raise TransactionError("Could not begin transaction", stage=IngestStage.BEGIN) from exc

        statement = self._prepare(transaction)

        persisted = 0
        received = 0
        try:
            for record in records:
                received += 1
                result = self.connection.execute(statement, _record_params(record))
                persisted += result.rowcount
        except Exception as exc:
            # record sources are lazy iterables and may fail mid-batch too
            self._rollback(transaction)
            log.error(f"Insert failed at record {received}, rolled back: {exc!r}")
            raise TransactionError(
                f"Insert failed at record {received}", stage=IngestStage.INSERT
            ) from exc

        try:
            transaction.commit()
        except SQLAlchemyError as exc:
            self._rollback(transaction)
            raise TransactionError("Could not commit", stage=IngestStage.COMMIT) from exc

        if persisted != received:
            log.warning("Ignored %s conflicting records", received - persisted)
        log.info("Persisted %s of %s nameservers", persisted, received)
        return persisted

    def _prepare(self, transaction: RootTransaction) -> Insert:
        dialect = self.connection.dialect
        try:
            if self.skip_conflicts:
                factory = _CONFLICT_TOLERANT_INSERTS.get(dialect.name)
                if factory is None:
                    raise TransactionError(
                        f"Skipping conflicts is not supported on {dialect.name}",
                        stage=IngestStage.PREPARE,
                    )
                statement: Insert = factory(nameserver_table).on_conflict_do_nothing()
            else:
                statement = insert(nameserver_table)
            statement.compile(dialect=dialect)
        except TransactionError:
            self._rollback(transaction)
            raise
        except SQLAlchemyError as exc:
            self._rollback(transaction)
            raise TransactionError(
                "Could not prepare insert statement", stage=IngestStage.PREPARE
            ) from exc
        return statement

    @staticmethod
    def _rollback(transaction: RootTransaction) -> None:
        if transaction.is_active:
            transaction.rollback()
