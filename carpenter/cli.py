"""Render a registered table from the command line.

Usage:
    carpenter-render users --config carpenter.yaml --format csv
    carpenter-render users --page 2 --sort name --dir desc

Tables are registered by the file named in ``tables.location``.
"""

import argparse
import logging
import sys
from typing import Optional

from carpenter.carpenter import Carpenter
from carpenter.config import load_config
from carpenter.exceptions import CarpenterCollectionError, TableLocationNotFound
from carpenter.table import Table

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carpenter-render",
        description="Render a registered Carpenter table to stdout",
    )
    parser.add_argument("name", help="Registered table name")
    parser.add_argument("--config", help="YAML configuration file (default: $CARPENTER_CONFIG)")
    parser.add_argument(
        "--format",
        choices=["html", "csv", "json"],
        default="html",
        help="Output format (default: html)",
    )
    parser.add_argument("--page", type=int, help="Page to render")
    parser.add_argument("--sort", help="Column key to sort by")
    parser.add_argument("--dir", choices=["asc", "desc"], help="Sort direction")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    carpenter = Carpenter(load_config(args.config))

    try:
        carpenter.load_tables()
    except TableLocationNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    def apply_args(table: Table) -> None:
        table.update_state(sort=args.sort, direction=args.dir, page=args.page)

    try:
        table = carpenter.get(args.name, apply_args)
    except CarpenterCollectionError as e:
        print(f"Error: {e}. Available: {carpenter.list_keys()}", file=sys.stderr)
        return 1

    if args.format == "csv":
        output = table.to_csv()
    elif args.format == "json":
        output = table.to_dict().model_dump_json(indent=2) + "\n"
    else:
        output = table.render()

    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
