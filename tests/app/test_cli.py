from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from pubdns.app import RefreshResult
from pubdns.domain.errors import NameserverNotFoundError
from pubdns.domain.model import CountryTally, Nameserver
from pubdns.ui import cli


def _server(ip_address: str, country: str) -> Nameserver:
    return Nameserver(
        ip_address=ip_address,
        name="resolver.example.",
        country=country,
        city="Berlin",
        reliability=1.0,
        checked_at=datetime(2016, 8, 23, 9, 12, 44, tzinfo=UTC),
    )


def test_ingest_from_file(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    captured: dict[str, object] = {}

    def fake_refresh(**kwargs: object) -> RefreshResult:
        captured.update(kwargs)
        return RefreshResult(source="nameservers.csv", decoded=3, persisted=3)

    monkeypatch.setattr(cli, "refresh_nameservers", fake_refresh)

    cli.main(["ingest", "--file", "nameservers.csv"])

    assert captured == {"path": Path("nameservers.csv"), "url": None, "skip_conflicts": False}
    assert capsys.readouterr().out == "3\tnameservers.csv\n"


def test_ingest_from_url_with_skip_conflicts(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_refresh(**kwargs: object) -> RefreshResult:
        captured.update(kwargs)
        return RefreshResult(source="https://mirror.test/ns.csv", decoded=2, persisted=1)

    monkeypatch.setattr(cli, "refresh_nameservers", fake_refresh)

    cli.main(["ingest", "--url", "https://mirror.test/ns.csv", "--skip-conflicts"])

    assert captured == {"path": None, "url": "https://mirror.test/ns.csv", "skip_conflicts": True}


def test_best_prints_one_line_per_country(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    requested: list[list[str]] = []

    def fake_best(countries: list[str]) -> list[Nameserver]:
        requested.append(countries)
        return [_server("194.150.168.168", "DE"), _server("8.8.8.8", "US")]

    monkeypatch.setattr(cli, "best_nameservers", fake_best)

    cli.main(["best", "US", "DE"])

    lines = capsys.readouterr().out.splitlines()
    assert requested == [["US", "DE"]]
    assert lines[0] == "194.150.168.168\tDE\tBerlin\tresolver.example.\t1.00\t2016-08-23T09:12:44+00:00"
    assert lines[1].startswith("8.8.8.8\tUS\t")


def test_tally_prints_counts(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli, "country_tally", lambda: [CountryTally(country="DE", total=4)])

    cli.main(["tally"])

    assert capsys.readouterr().out == "DE\t4\n"


def test_top_exits_1_when_country_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_top(country: str) -> Nameserver:
        raise NameserverNotFoundError(f"No nameserver stored for country {country!r}")

    monkeypatch.setattr(cli, "best_nameserver", fake_top)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["top", "PT"])

    assert excinfo.value.code == 1


def test_best_requires_a_country() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["best"])

    assert excinfo.value.code == 2


def test_ingest_rejects_file_and_url_together() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["ingest", "--file", "a.csv", "--url", "https://mirror.test/ns.csv"])

    assert excinfo.value.code == 2
