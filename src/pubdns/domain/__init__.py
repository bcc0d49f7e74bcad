"""Domain layer: nameserver records, errors and ports."""

from __future__ import annotations

from .errors import (
    DecodeError,
    FetchError,
    IngestError,
    IngestStage,
    InvalidArgumentError,
    NameserverNotFoundError,
    NotFoundError,
    PublicDnsError,
    SchemaError,
    SourceNotFoundError,
    TransactionError,
)
from .model import MAX_RELIABILITY, MIN_RELIABILITY, CountryTally, Nameserver

__all__ = [
    "MAX_RELIABILITY",
    "MIN_RELIABILITY",
    "CountryTally",
    "DecodeError",
    "FetchError",
    "IngestError",
    "IngestStage",
    "InvalidArgumentError",
    "Nameserver",
    "NameserverNotFoundError",
    "NotFoundError",
    "PublicDnsError",
    "SchemaError",
    "SourceNotFoundError",
    "TransactionError",
]
