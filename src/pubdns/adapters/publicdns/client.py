"""HTTP retrieval of the public-dns.info CSV export."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from pubdns.config.source import SourceConfig, get_source_config
from pubdns.domain.errors import FetchError, SourceNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

_MISSING_STATUSES = frozenset({404, 410})


def _default_client_factory(config: SourceConfig) -> httpx.Client:
    return httpx.Client(
        timeout=config.timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": config.user_agent},
    )


@dataclass(slots=True)
class HttpNameserverFetcher:
    """Download the CSV export into a local file with a single blocking request."""

    config: SourceConfig = field(default_factory=get_source_config)
    client_factory: Callable[[SourceConfig], httpx.Client] = field(
        default=_default_client_factory
    )

    def __call__(self, destination: Path, *, url: str | None = None) -> int:
        target = url or self.config.url
        try:
            written = self._download(target, destination)
        except BaseException:
            destination.unlink(missing_ok=True)
            raise

        if written == 0:
            destination.unlink(missing_ok=True)
            raise FetchError(f"No bytes written while fetching {target}")
        return written

    def _download(self, url: str, destination: Path) -> int:
        written = 0
        try:
            with (
                self.client_factory(self.config) as client,
                client.stream("GET", url) as response,
            ):
                if response.status_code in _MISSING_STATUSES:
                    raise SourceNotFoundError(f"{url} returned HTTP {response.status_code}")
                response.raise_for_status()
                with destination.open("wb") as sink:
                    for chunk in response.iter_bytes():
                        written += sink.write(chunk)
        except httpx.HTTPError as exc:
            log.error(f"Fetching {url} failed: {exc}")
            raise FetchError(f"Fetching {url} failed: {exc}") from exc
        except OSError as exc:
            raise FetchError(f"Cannot write {destination}: {exc}") from exc
        return written


if TYPE_CHECKING:
    from pubdns.domain.ports import NameserverFetcher

    _fetcher_check: NameserverFetcher = HttpNameserverFetcher()
