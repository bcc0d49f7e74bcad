"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pubdns.adapters.publicdns import HttpNameserverFetcher, load_from_file, load_from_url
from pubdns.adapters.sqlalchemy import (
    NameserverIngestor,
    SqlAlchemyUnitOfWork,
    configured_engine,
    is_started,
    startup,
)
from pubdns.config import get_source_config, get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

    from pubdns.domain.model import CountryTally, Nameserver
    from pubdns.domain.ports import NameserverFetcher

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class RefreshResult:
    """Outcome of a full dataset refresh."""

    source: str
    decoded: int
    persisted: int


def _ensure_started() -> None:
    if not is_started():
        startup()


def refresh_nameservers(
    *,
    path: Path | None = None,
    url: str | None = None,
    fetcher: NameserverFetcher | None = None,
    skip_conflicts: bool = False,
) -> RefreshResult:
    """Replace the stored dataset with a local file or a fresh download."""

    _ensure_started()

    if path is not None:
        source = str(path)
        log.info("Starting refresh from file %s", source)
        records = load_from_file(path)
    else:
        source_config = get_source_config()
        source = url or source_config.url
        destination = get_storage_config().staging_path()
        log.info("Starting refresh from %s (staging to %s)", source, destination)
        records = load_from_url(
            source,
            destination,
            fetcher=fetcher or HttpNameserverFetcher(config=source_config),
        )

    with configured_engine().connect() as connection:
        persisted = NameserverIngestor(connection, skip_conflicts=skip_conflicts).load(records)

    result = RefreshResult(source=source, decoded=len(records), persisted=persisted)
    log.info(f"Finished refresh: decoded={result.decoded}, persisted={result.persisted}")
    return result


def _unit_of_work(factory: UnitOfWorkFactory | None) -> SqlAlchemyUnitOfWork:
    if factory is not None:
        return factory()
    _ensure_started()
    return SqlAlchemyUnitOfWork()


def nameservers_for_country(
    country: str, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> list[Nameserver]:
    with _unit_of_work(unit_of_work_factory) as uow:
        return uow.nameservers.all_for_country(country)


def best_nameserver(
    country: str, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> Nameserver:
    with _unit_of_work(unit_of_work_factory) as uow:
        return uow.nameservers.best_for_country(country)


def best_nameservers(
    countries: list[str], *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> list[Nameserver]:
    with _unit_of_work(unit_of_work_factory) as uow:
        return uow.nameservers.best_per_country(countries)


def country_tally(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[CountryTally]:
    with _unit_of_work(unit_of_work_factory) as uow:
        return uow.nameservers.tally_good_per_country()
