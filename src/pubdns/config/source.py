"""Upstream feed configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from pubdns import __version__

from .env import env_float, env_str

DEFAULT_SOURCE_URL = "https://public-dns.info/nameservers.csv"
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class SourceConfig:
    url: str = DEFAULT_SOURCE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = f"pubdns/{__version__}"


def get_source_config() -> SourceConfig:
    return SourceConfig(
        url=env_str("PUBDNS_SOURCE_URL", DEFAULT_SOURCE_URL),
        timeout_seconds=env_float("PUBDNS_FETCH_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
    )
