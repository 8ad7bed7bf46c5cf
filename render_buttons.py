"""CLI entrypoint for rendering location buttons."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from listingbuttons.db import DEFAULT_TABLE_PREFIX, DataAccessError, Database, resolve_sqlite_path
from listingbuttons.service import ListingCountService

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Listing count location buttons")
    parser.add_argument("--init", action="store_true", help="create the count tables and exit")
    parser.add_argument("--count", metavar="LOCATION", help="print the listing count for a location")
    parser.add_argument("--buttons", action="store_true", help="render location buttons as HTML")
    parser.add_argument(
        "--list-property-types",
        action="store_true",
        help="print every entry of the property type catalog",
    )
    parser.add_argument("--export", metavar="PATH", help="export the count table to an xlsx file")
    parser.add_argument("--type", default="zip", help="grouping mode (zip, tract, county, ...)")
    parser.add_argument(
        "--property-type",
        dest="property_types",
        action="append",
        type=int,
        default=[],
        help="property type id; repeat to select several, order is kept",
    )
    parser.add_argument("--output", metavar="PATH", help="write rendered HTML to PATH instead of stdout")
    parser.add_argument(
        "--database-url",
        default=os.getenv("DATABASE_URL", "sqlite:///listing_counts.db"),
        help="database to read (overrides DATABASE_URL env var)",
    )
    parser.add_argument(
        "--table-prefix",
        default=os.getenv("TABLE_PREFIX", DEFAULT_TABLE_PREFIX),
        help="table name prefix (overrides TABLE_PREFIX env var)",
    )
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    database = Database(
        path=resolve_sqlite_path(args.database_url),
        table_prefix=args.table_prefix,
    )
    service = ListingCountService(executor=database)

    if args.init:
        logger.info("Initializing tables at %s", database.path)
        database.initialize()
        return 0

    if not (args.count or args.buttons or args.list_property_types or args.export):
        parser.print_help()
        return 1

    try:
        if args.count:
            count = service.get_count(args.count, args.property_types)
            print(count)

        if args.buttons:
            markup = service.generate_location_buttons(args.property_types, args.type)
            if args.output:
                Path(args.output).write_text(markup, encoding="utf-8")
                logger.info("Wrote location buttons to %s", args.output)
            else:
                print(markup)

        if args.list_property_types:
            for property_type in service.list_all_property_types():
                print(f"{property_type.property_type_id}\t{property_type.display_name}")

        if args.export:
            database.export_counts_to_xlsx(Path(args.export))
    except DataAccessError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
