"""Command line front end for querying the catalog."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Iterable, List, Optional, Sequence, TextIO, Tuple

from pydantic import BaseModel

from .client import CatalogClient
from .config import CatalogSettings
from .exceptions import CatalogError
from .logging_config import setup_logging
from .models import dump_entity
from .query import DEFAULT_PAGE_SIZE, Query
from .standard import FormatWindowClient, standard_cards, standard_sets

LOGGER = logging.getLogger(__name__)


def parse_filter(raw: str) -> Tuple[str, str]:
    """Split a ``COLUMN=VALUE`` argument."""

    column, sep, value = raw.partition("=")
    if not sep or not column.strip():
        raise argparse.ArgumentTypeError(f"Expected COLUMN=VALUE, got {raw!r}")
    return column.strip(), value


def _add_query_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--where",
        dest="filters",
        action="append",
        type=parse_filter,
        default=[],
        metavar="COLUMN=VALUE",
        help="Filter by a column; repeat for several filters",
    )
    parser.add_argument("--page", type=int, default=None, help="Fetch only this page")
    parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help=f"Page size used together with --page (default {DEFAULT_PAGE_SIZE})",
    )


def build_argument_parser() -> argparse.ArgumentParser:
    defaults = CatalogSettings.from_env()
    parser = argparse.ArgumentParser(description="Query the Magic: The Gathering catalog API")
    parser.add_argument("--base-url", default=defaults.base_url, help="Catalog API base URL")
    parser.add_argument("--standard-url", default=defaults.standard_url, help="Format-window service URL")
    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Per-request timeout in seconds",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    cards = commands.add_parser("cards", help="List cards matching filters")
    _add_query_arguments(cards)
    cards.add_argument("--random", type=int, default=None, metavar="N", help="Return N random cards")

    sets = commands.add_parser("sets", help="List sets matching filters")
    _add_query_arguments(sets)

    card = commands.add_parser("card", help="Fetch one card by id or multiverse id")
    card.add_argument("card_id")

    set_ = commands.add_parser("set", help="Fetch one set by code")
    set_.add_argument("code")

    booster = commands.add_parser("booster", help="Generate a booster for a set")
    booster.add_argument("code")

    commands.add_parser("standard-sets", help="List the sets currently in Standard")
    commands.add_parser("standard-cards", help="List the cards currently in Standard")
    return parser


def _apply_filters(query: Query, filters: Iterable[Tuple[str, str]]) -> Query:
    for column, value in filters:
        query.where(column, value)
    return query


def _run_query(query: Query, args: argparse.Namespace) -> List[BaseModel]:
    if args.page is None:
        return query.all()
    result = query.page(args.page, args.page_size or DEFAULT_PAGE_SIZE)
    LOGGER.info("Page %d holds %d of %d matches", args.page, len(result.items), result.total_count)
    return result.items


def execute(args: argparse.Namespace) -> List[BaseModel]:
    settings = CatalogSettings.from_env().with_overrides(
        base_url=args.base_url,
        standard_url=args.standard_url,
        timeout=args.timeout,
    )
    client = CatalogClient.from_settings(settings)

    if args.command == "cards":
        query = _apply_filters(client.cards(), args.filters)
        if args.random is not None:
            return list(query.random(args.random))
        return _run_query(query, args)
    if args.command == "sets":
        return _run_query(_apply_filters(client.sets(), args.filters), args)
    if args.command == "card":
        return [client.fetch_card(args.card_id)]
    if args.command == "set":
        return [client.fetch_set(args.code)]
    if args.command == "booster":
        return list(client.generate_booster(args.code))

    format_client = FormatWindowClient.from_settings(settings)
    if args.command == "standard-sets":
        return list(standard_sets(client, format_client))
    if args.command == "standard-cards":
        return list(standard_cards(client, format_client))
    raise ValueError(f"Unknown command: {args.command}")


def write_entities(entities: Iterable[BaseModel], stream: TextIO) -> None:
    for entity in entities:
        stream.write(json.dumps(dump_entity(entity), ensure_ascii=False))
        stream.write("\n")


def run_from_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    if getattr(args, "page_size", None) is not None and args.page is None:
        parser.error("--page-size requires --page")

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        entities = execute(args)
    except CatalogError as exc:
        LOGGER.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        parser.error(str(exc))

    write_entities(entities, sys.stdout)
    return 0


__all__ = ["build_argument_parser", "execute", "parse_filter", "run_from_cli", "write_entities"]
