"""Read-only nameserver queries backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import aliased

from pubdns.domain.errors import InvalidArgumentError, NameserverNotFoundError
from pubdns.domain.model import MAX_RELIABILITY, CountryTally, Nameserver

from .mappings import nameserver_table, start_mappers

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

_columns = nameserver_table.c


def _normalize_country(country: str) -> str:
    return country.strip().upper()


def _is_good() -> ColumnElement[bool]:
    """Named, located and fully reliable. Highest-available does not count."""
    return (
        (_columns.name != "")
        & (_columns.city != "")
        & (_columns.reliability == MAX_RELIABILITY)
    )


class SqlAlchemyNameserverRepository:
    def __init__(self, session: Session) -> None:
        start_mappers()
        self.session = session

    def all_for_country(self, country: str) -> list[Nameserver]:
        stmt = select(Nameserver).where(_columns.country == _normalize_country(country))
        return list(self.session.execute(stmt).scalars())

    def best_for_country(self, country: str) -> Nameserver:
        """Return the most reliable server of ``country``; ties follow the engine's scan order."""

        code = _normalize_country(country)
        stmt = (
            select(Nameserver)
            .where(_columns.country == code)
            .order_by(_columns.reliability.desc())
            .limit(1)
        )
        nameserver = self.session.execute(stmt).scalar_one_or_none()
        if nameserver is None:
            raise NameserverNotFoundError(f"No nameserver stored for country {code!r}")
        return nameserver

    def best_per_country(self, countries: Iterable[str]) -> list[Nameserver]:
        """Return at most one good server per requested country.

        Among good servers the one checked longest ago wins; ties go to the
        lowest address. Countries without a good server are simply absent, so
        the result can be shorter than ``countries``.
        """

        codes = sorted({_normalize_country(country) for country in countries})
        if not codes:
            raise InvalidArgumentError("At least one country code is required")

        rank = (
            func.row_number()
            .over(
                partition_by=_columns.country,
                order_by=(_columns.checked_at.asc().nulls_last(), _columns.ip_address.asc()),
            )
            .label("rank")
        )
        ranked = (
            select(nameserver_table, rank)
            .where(_columns.country.in_(codes))
            .where(_is_good())
            .subquery("ranked")
        )
        best = aliased(Nameserver, ranked)
        stmt = select(best).where(ranked.c.rank == 1).order_by(ranked.c.country)
        return list(self.session.execute(stmt).scalars())

    def tally_good_per_country(self) -> list[CountryTally]:
        stmt = (
            select(_columns.country, func.count(_columns.ip_address).label("total"))
            .where(_is_good())
            .group_by(_columns.country)
            .order_by(_columns.country)
        )
        return [
            CountryTally(country=row.country, total=row.total)
            for row in self.session.execute(stmt)
        ]


if TYPE_CHECKING:
    from typing import cast

    from pubdns.domain.ports import NameserverRepository

    _repo_check: NameserverRepository = SqlAlchemyNameserverRepository(cast("Session", object()))
