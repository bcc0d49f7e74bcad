from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pubdns.domain.model import MAX_RELIABILITY, Nameserver

BASE_TIME = datetime(2024, 1, 7, 12, tzinfo=UTC)


def make_nameserver(
    ip_address: str,
    *,
    country: str = "US",
    name: str | None = None,
    city: str = "Mountain View",
    reliability: float = MAX_RELIABILITY,
    checked_minutes_ago: int = 0,
) -> Nameserver:
    return Nameserver(
        ip_address=ip_address,
        name=f"ns-{ip_address.replace('.', '-')}.example." if name is None else name,
        country=country,
        city=city,
        version="dnsmasq-2.80",
        dnssec=True,
        reliability=reliability,
        checked_at=BASE_TIME - timedelta(minutes=checked_minutes_ago),
        created_at=BASE_TIME - timedelta(days=365),
    )
