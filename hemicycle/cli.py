#!/usr/bin/env python3
"""Command line entry point: run one scraper and print its record as JSON."""

import argparse
import json
import logging
import sys

from hemicycle.errors import HemicycleError
from hemicycle.sources.base import available_scrapers, get_scraper
from hemicycle.sources.fetcher import DocumentFetcher, create_provider
from hemicycle.sources.locations import LocationResolver
from hemicycle.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape the Belgian Chamber and Senate websites")
    parser.add_argument("scraper", choices=available_scrapers(), help="Scraper key, e.g. k.mp or s.dossier")
    parser.add_argument("--identifier", help="Member, committee or dossier identifier")
    parser.add_argument("--legislature-number", type=int, help="Legislature to scrape")
    parser.add_argument("--lang", help="Page language (fr or nl)")
    parser.add_argument("--url", help="Scrape this location instead of the resolved one")
    parser.add_argument("--week-type", choices=["week", "next_week"], help="Senate weekly agenda to read")
    parser.add_argument("--locations", help="Location templates file to use instead of the packaged one")
    parser.add_argument("--log-level", help="Logging level (defaults to LOG_LEVEL or INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    options = {
        "identifier": args.identifier,
        "legislature_number": args.legislature_number,
        "lang": args.lang,
        "url": args.url,
        "week_type": args.week_type,
    }
    options = {key: value for key, value in options.items() if value is not None}

    resolver = LocationResolver.from_file(args.locations) if args.locations else None
    with DocumentFetcher() as fetcher:
        scraper = get_scraper(args.scraper, create_provider(resolver, fetcher))
        try:
            record = scraper.scrape_record(options)
        except HemicycleError as e:
            logger.error(f"{args.scraper} failed: {e}")
            return 1

    json.dump(record, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
