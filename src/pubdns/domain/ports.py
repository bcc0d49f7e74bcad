"""Ports for fetching and querying nameserver data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from pubdns.domain.model import CountryTally, Nameserver


@runtime_checkable
class NameserverFetcher(Protocol):
    """Callable port that stages a remote CSV into a local file and returns the byte count."""

    def __call__(self, destination: Path, *, url: str | None = None) -> int: ...


@runtime_checkable
class NameserverRepository(Protocol):
    """Read-only queries against the last ingested dataset."""

    def all_for_country(self, country: str) -> list[Nameserver]: ...

    def best_for_country(self, country: str) -> Nameserver: ...

    def best_per_country(self, countries: Iterable[str]) -> list[Nameserver]: ...

    def tally_good_per_country(self) -> list[CountryTally]: ...


__all__ = ["NameserverFetcher", "NameserverRepository"]
