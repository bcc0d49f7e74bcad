"""Nameserver records as published by public-dns.info."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

type CountryCode = str

MIN_RELIABILITY: Final[float] = 0.0
MAX_RELIABILITY: Final[float] = 1.0


@dataclass(eq=False, kw_only=True)
class Nameserver:
    """One resolver entry of the dataset and one row of the ``nameservers`` table."""

    # ipv4 address of the server, unique across the dataset
    ip_address: str
    # reverse lookup hostname, empty when the server has none
    name: str = ""
    # ISO 3166-1 alpha-2 code, may be empty
    country: CountryCode = ""
    city: str = ""
    # software version of the dns daemon
    version: str = ""
    # last error returned by the server, empty for healthy servers
    error: str = ""
    dnssec: bool = False
    # normalized from 0.0 to 1.0, higher is more stable
    reliability: float = MIN_RELIABILITY
    checked_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_good(self) -> bool:
        """Named, located and fully reliable."""
        return bool(self.name) and bool(self.city) and self.reliability == MAX_RELIABILITY


@dataclass(frozen=True, slots=True)
class CountryTally:
    country: CountryCode
    total: int
