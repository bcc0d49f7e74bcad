# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from pubdns.app import (
    best_nameserver,
    best_nameservers,
    country_tally,
    nameservers_for_country,
    refresh_nameservers,
)
from pubdns.config import configure_logging
from pubdns.domain.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pubdns.domain.model import Nameserver

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query the public-dns.info resolver list")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Replace the stored dataset")
    source = ingest.add_mutually_exclusive_group()
    source.add_argument("--file", type=Path, help="Local CSV export to load")
    source.add_argument(
        "--url",
        type=str,
        help="URL of the CSV export (defaults to PUBDNS_SOURCE_URL or public-dns.info)",
    )
    ingest.add_argument(
        "--skip-conflicts",
        action="store_true",
        help="Ignore duplicate addresses instead of aborting the load",
    )

    list_cmd = subparsers.add_parser("list", help="List every nameserver of a country")
    list_cmd.add_argument("country", type=str, help="ISO 3166-1 alpha-2 code")

    top = subparsers.add_parser("top", help="Most reliable nameserver of a country")
    top.add_argument("country", type=str, help="ISO 3166-1 alpha-2 code")

    best = subparsers.add_parser("best", help="Best fully reliable nameserver per country")
    best.add_argument("countries", nargs="+", type=str, help="ISO 3166-1 alpha-2 codes")

    subparsers.add_parser("tally", help="Count good nameservers per country")

    return parser.parse_args(list(argv))


def _format(nameserver: Nameserver) -> str:
    checked_at = nameserver.checked_at.isoformat() if nameserver.checked_at else ""
    return "\t".join(
        (
            nameserver.ip_address,
            nameserver.country,
            nameserver.city,
            nameserver.name,
            f"{nameserver.reliability:.2f}",
            checked_at,
        )
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    # argparse exits with status 2 on invalid arguments
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "ingest":
            result = refresh_nameservers(
                path=parsed_args.file,
                url=parsed_args.url,
                skip_conflicts=parsed_args.skip_conflicts,
            )
            print(f"{result.persisted}\t{result.source}")
        elif parsed_args.command == "list":
            for nameserver in nameservers_for_country(parsed_args.country):
                print(_format(nameserver))
        elif parsed_args.command == "top":
            print(_format(best_nameserver(parsed_args.country)))
        elif parsed_args.command == "best":
            for nameserver in best_nameservers(parsed_args.countries):
                print(_format(nameserver))
        elif parsed_args.command == "tally":
            for tally in country_tally():
                print(f"{tally.country}\t{tally.total}")
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except NotFoundError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
