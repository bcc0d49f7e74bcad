"""Decode the public-dns.info CSV export into nameserver records."""

from __future__ import annotations

import csv
import io
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from pubdns.domain.errors import DecodeError, SourceNotFoundError

from .schema import CSV_COLUMNS, NameserverRow

if TYPE_CHECKING:
    from typing import BinaryIO

    from pubdns.domain.model import Nameserver
    from pubdns.domain.ports import NameserverFetcher

log = getLogger(__name__)


def decode_nameservers(stream: BinaryIO) -> list[Nameserver]:
    """Decode a CSV byte stream into records, in file order.

    The whole stream is validated before anything is returned: a single bad row
    raises ``DecodeError`` and no records. An empty stream, or a header without
    rows, decodes to an empty list.
    """

    text = io.TextIOWrapper(stream, encoding="utf-8-sig", newline="")
    reader = csv.DictReader(text)
    try:
        return _decode_rows(reader)
    except UnicodeDecodeError as exc:
        raise DecodeError("content is not valid UTF-8", line=reader.line_num) from exc
    except csv.Error as exc:
        raise DecodeError(str(exc), line=reader.line_num) from exc
    except OSError as exc:
        raise SourceNotFoundError(f"Cannot read nameserver source: {exc}") from exc
    finally:
        # the caller owns the binary stream
        text.detach()


def _decode_rows(reader: csv.DictReader[str]) -> list[Nameserver]:
    header = reader.fieldnames
    if header is None:
        return []

    missing = [column for column in CSV_COLUMNS if column not in header]
    if missing:
        raise DecodeError(f"missing columns: {', '.join(missing)}", line=1)

    records: list[Nameserver] = []
    for row in reader:
        if None in row or any(value is None for value in row.values()):
            raise DecodeError(f"expected {len(header)} columns", line=reader.line_num)
        try:
            parsed = NameserverRow.model_validate(row)
        except ValidationError as exc:
            raise DecodeError(_describe(exc), line=reader.line_num) from exc
        records.append(parsed.to_nameserver())
    return records


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}"


def load_from_file(path: str | Path) -> list[Nameserver]:
    """Open a local CSV file and decode it."""

    source = Path(path)
    try:
        handle = source.open("rb")
    except OSError as exc:
        raise SourceNotFoundError(f"Cannot open nameserver file {source}") from exc

    with handle:
        records = decode_nameservers(handle)

    log.info("Decoded %s nameservers from %s", len(records), source)
    return records


def load_from_url(
    url: str,
    destination: Path,
    *,
    fetcher: NameserverFetcher,
) -> list[Nameserver]:
    """Stage the remote CSV into ``destination`` and decode the local copy."""

    written = fetcher(destination, url=url)
    log.info("Fetched %s bytes from %s into %s", written, url, destination)
    return load_from_file(destination)
