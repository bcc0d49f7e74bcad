"""Error taxonomy shared by the loader, the ingestor and the queries."""

from __future__ import annotations

from enum import StrEnum


class PublicDnsError(RuntimeError):
    """Base class for every failure raised by pubdns."""


class NotFoundError(PublicDnsError):
    """Something that was asked for does not exist."""


class SourceNotFoundError(NotFoundError):
    """The CSV source (file or URL) cannot be opened or read."""


class NameserverNotFoundError(NotFoundError):
    """No stored nameserver matches the query."""


class DecodeError(PublicDnsError, ValueError):
    """The CSV content does not have the expected shape."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message if line is None else f"line {line}: {message}")
        self.line = line


class FetchError(PublicDnsError):
    """Retrieving the remote CSV failed, including empty responses."""


class InvalidArgumentError(PublicDnsError, ValueError):
    """A query was called with arguments it cannot be built from."""


class IngestStage(StrEnum):
    CREATE_TABLE = "create_table"
    CREATE_INDEX = "create_index"
    BEGIN = "begin"
    PREPARE = "prepare"
    INSERT = "insert"
    COMMIT = "commit"


class IngestError(PublicDnsError):
    """An ingest failed; nothing from the attempted batch is durable."""

    persisted = 0

    def __init__(self, message: str, *, stage: IngestStage) -> None:
        super().__init__(f"{message} (stage: {stage})")
        self.stage = stage


class SchemaError(IngestError):
    """Creating the table or its indexes failed."""


class TransactionError(IngestError):
    """Beginning, preparing, executing or committing the bulk insert failed."""
