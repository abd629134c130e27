"""Command-line entry point for the MediaCloset resolver."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from mediacloset.core.barcode import clean_barcode
from mediacloset.core.config import load_settings
from mediacloset.core.resolver import (
    LookupCancelledError,
    LookupNotImplementedError,
    NoMatchError,
)
from mediacloset.service import MetadataService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOOKUP_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mediacloset",
        description="Resolve album and movie metadata from barcodes and titles",
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="lookup deadline in seconds",
    )
    parser.add_argument(
        "--env-file", default=None, help="path to a .env file",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    album = sub.add_parser("album", help="look up an album by barcode")
    album.add_argument("barcode")

    search = sub.add_parser("album-search", help="look up an album by artist and title")
    search.add_argument("artist")
    search.add_argument("album")

    movie = sub.add_parser("movie", help="look up a movie by title")
    movie.add_argument("title")
    movie.add_argument("--director", default=None, help="expected director")
    movie.add_argument("--year", type=int, default=None, help="release year")

    movie_barcode = sub.add_parser("movie-barcode", help="look up a movie by barcode")
    movie_barcode.add_argument("barcode")

    clean = sub.add_parser("clean", help="print the normalized barcode")
    clean.add_argument("barcode")

    return parser


async def run_command(args: argparse.Namespace, service: MetadataService) -> dict[str, Any]:
    """Run the lookup selected on the command line.

    Returns:
        The resulting record as a JSON-serializable dict.
    """
    if args.command == "album":
        album = await service.lookup_album(args.barcode, args.timeout)
        return album.to_dict()
    if args.command == "album-search":
        album = await service.lookup_album_by_title(args.artist, args.album, args.timeout)
        return album.to_dict()
    if args.command == "movie":
        movie = await service.lookup_movie(args.title, args.director, args.year, args.timeout)
        return movie.to_dict()
    if args.command == "movie-barcode":
        movie = await service.lookup_movie_by_barcode(args.barcode, args.timeout)
        return movie.to_dict()
    raise ValueError(f"unknown command: {args.command}")


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    settings = load_settings(args.env_file)
    async with MetadataService(settings) as service:
        return await run_command(args, service)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the MediaCloset CLI.

    Returns:
        Exit code (0 success, 1 lookup failure, 2 not implemented or usage error).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "clean":
        print(json.dumps({"original": args.barcode, "cleaned": clean_barcode(args.barcode)}))
        return EXIT_OK

    try:
        record = asyncio.run(_run(args))
    except LookupNotImplementedError as e:
        logger.error("%s", e)
        return EXIT_USAGE
    except (NoMatchError, LookupCancelledError) as e:
        logger.error("%s", e)
        return EXIT_LOOKUP_FAILED

    print(json.dumps(record, indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
