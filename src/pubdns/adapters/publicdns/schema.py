"""Pydantic model describing one row of the public-dns.info CSV export."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pubdns.domain.model import MIN_RELIABILITY, Nameserver

CSV_COLUMNS: Final[tuple[str, ...]] = (
    "ip",
    "name",
    "country_id",
    "city",
    "version",
    "error",
    "dnssec",
    "reliability",
    "checked_at",
    "created_at",
)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class NameserverRow(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    ip_address: str = Field(alias="ip", min_length=1)
    name: str = ""
    country: str = Field(default="", alias="country_id")
    city: str = ""
    version: str = ""
    error: str = ""
    dnssec: bool = False
    reliability: float = MIN_RELIABILITY
    checked_at: datetime | None = None
    created_at: datetime | None = None

    @field_validator("dnssec", mode="before")
    @classmethod
    def _blank_is_false(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return False
        return value

    @field_validator("reliability", mode="before")
    @classmethod
    def _coerce_reliability(cls, value: object) -> float:
        # unparsable or non-finite scores rank last instead of failing the whole file
        try:
            score = float(value)  # pyright: ignore[reportArgumentType]
        except (TypeError, ValueError):
            return MIN_RELIABILITY
        return score if math.isfinite(score) else MIN_RELIABILITY

    _blank_timestamps = field_validator("checked_at", "created_at", mode="before")(
        _blank_to_none
    )

    @field_validator("checked_at", "created_at")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def to_nameserver(self) -> Nameserver:
        return Nameserver(
            ip_address=self.ip_address,
            name=self.name,
            country=self.country,
            city=self.city,
            version=self.version,
            error=self.error,
            dnssec=self.dnssec,
            reliability=self.reliability,
            checked_at=self.checked_at,
            created_at=self.created_at,
        )
