"""Public interface for the public-dns.info adapter."""

from __future__ import annotations

from .client import HttpNameserverFetcher
from .loader import decode_nameservers, load_from_file, load_from_url
from .schema import CSV_COLUMNS, NameserverRow

__all__ = [
    "CSV_COLUMNS",
    "HttpNameserverFetcher",
    "NameserverRow",
    "decode_nameservers",
    "load_from_file",
    "load_from_url",
]
