from __future__ import annotations

import io
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003

import pytest

from pubdns.adapters.publicdns import decode_nameservers, load_from_file, load_from_url
from pubdns.domain.errors import DecodeError, SourceNotFoundError
from pubdns.domain.model import MIN_RELIABILITY, Nameserver

HEADER = b"ip,name,country_id,city,version,error,dnssec,reliability,checked_at,created_at\n"


def _decode(body: bytes) -> list[Nameserver]:
    return decode_nameservers(io.BytesIO(HEADER + body))


def test_load_from_file_returns_records_in_file_order(sample_csv: Path) -> None:
    servers = load_from_file(sample_csv)

    assert [server.ip_address for server in servers] == [
        "8.8.8.8",
        "194.150.168.168",
        "8.8.4.4",
    ]


def test_load_from_file_maps_and_coerces_fields(sample_csv: Path) -> None:
    german = load_from_file(sample_csv)[1]

    assert german.name == "dns.as250.net."
    assert german.country == "DE"
    assert german.city == "Berlin"
    assert german.version == "dnsmasq-2.75"
    assert german.error == ""
    assert german.dnssec is False
    assert german.reliability == 1.0
    assert german.checked_at == datetime(2016, 8, 23, 9, 12, 44, tzinfo=UTC)
    assert german.created_at == datetime(2014, 2, 3, 19, 1, 27, tzinfo=UTC)


def test_load_from_missing_file_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(SourceNotFoundError):
        load_from_file(tmp_path / "nameservers.test.csv.does.not.exist")


def test_decode_empty_stream_yields_no_records() -> None:
    assert decode_nameservers(io.BytesIO(b"")) == []


def test_decode_header_only_yields_no_records() -> None:
    assert _decode(b"") == []


def test_decode_leaves_caller_stream_open() -> None:
    stream = io.BytesIO(HEADER)

    decode_nameservers(stream)

    assert not stream.closed


def test_decode_rejects_missing_columns() -> None:
    stream = io.BytesIO(b"ip,name,country_id\n1.1.1.1,one.one.one.one.,AU\n")

    with pytest.raises(DecodeError) as excinfo:
        decode_nameservers(stream)

    assert "city" in str(excinfo.value)


def test_decode_rejects_wrong_column_count() -> None:
    body = (
        b"1.1.1.1,one.,AU,Sydney,,,true,1.00,2016-08-23T10:38:08Z,2013-06-15T14:21:05Z\n"
        b"1.0.0.1,one.,AU,Sydney,,,true,1.00,2016-08-23T10:38:08Z\n"
    )

    with pytest.raises(DecodeError) as excinfo:
        _decode(body)

    assert excinfo.value.line == 3


def test_decode_rejects_malformed_timestamp() -> None:
    body = b"1.1.1.1,one.,AU,Sydney,,,true,1.00,yesterday,2013-06-15T14:21:05Z\n"

    with pytest.raises(DecodeError) as excinfo:
        _decode(body)

    assert "checked_at" in str(excinfo.value)


def test_decode_rejects_blank_address() -> None:
    with pytest.raises(DecodeError):
        _decode(b",one.,AU,Sydney,,,true,1.00,,\n")


def test_decode_rejects_invalid_utf8() -> None:
    with pytest.raises(DecodeError):
        decode_nameservers(io.BytesIO(b"\xff\xfe\x00ip\n"))


def test_decode_degrades_unparsable_reliability_and_blank_values() -> None:
    servers = _decode(b"1.1.1.1,,AU,,,,,n/a,,\n")

    assert len(servers) == 1
    server = servers[0]
    assert server.reliability == MIN_RELIABILITY
    assert server.dnssec is False
    assert server.checked_at is None
    assert server.created_at is None
    assert server.name == ""


@pytest.mark.parametrize("score", ["nan", "inf", "-inf", "Infinity"])
def test_decode_ranks_non_finite_reliability_last(score: str) -> None:
    servers = _decode(f"1.1.1.1,one.,AU,Sydney,,,1,{score},,\n".encode())

    assert servers[0].reliability == MIN_RELIABILITY


def test_decode_treats_naive_timestamps_as_utc() -> None:
    servers = _decode(b"1.1.1.1,one.,AU,Sydney,,,1,0.5,2016-08-23 10:38:08,\n")

    assert servers[0].checked_at == datetime(2016, 8, 23, 10, 38, 8, tzinfo=UTC)
    assert servers[0].dnssec is True


def test_load_from_url_decodes_staged_file(tmp_path: Path, sample_csv: Path) -> None:
    calls: list[tuple[Path, str | None]] = []

    def fake_fetcher(destination: Path, *, url: str | None = None) -> int:
        calls.append((destination, url))
        return destination.write_bytes(sample_csv.read_bytes())

    destination = tmp_path / "nameservers.temp.csv"
    servers = load_from_url("https://example.test/nameservers.csv", destination, fetcher=fake_fetcher)

    assert len(servers) == 3
    assert calls == [(destination, "https://example.test/nameservers.csv")]
