#!/usr/bin/env python3
"""Look up entries in a published dictionary sheet from the command line.

Loads the CSV from a local export (--file) or the published URL (--url, default:
the configured SHEET_CSV_URL), parses it with the same rules as the API and
prints the entries matching --query.

Usage:
  python scripts/lookup_cli.py --file dictionary.csv --query cat
  python scripts/lookup_cli.py --query CAT --mode exact
  python scripts/lookup_cli.py --file dictionary.csv --headers   # show normalized keys only
"""
from __future__ import annotations
import argparse
import asyncio
import os
import sys

# Make backend modules importable the same way the app imports them
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend"))

from config import settings  # noqa: E402
from utils.csv_utils import parse_csv_text, read_csv_file  # noqa: E402
from utils.fetcher import RetrievalError, fetch_csv_text  # noqa: E402
from utils.search_utils import filter_records, is_empty_query  # noqa: E402


def load_text(args: argparse.Namespace) -> str:
    if args.file:
        return read_csv_file(args.file)
    return asyncio.run(fetch_csv_text(args.url or settings.SHEET_CSV_URL, timeout=settings.FETCH_TIMEOUT_SECONDS))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Search a dictionary sheet exported as CSV")
    source = parser.add_mutually_exclusive_group()
    source.add_argument('--file', '-f', help='Path to a local CSV export')
    source.add_argument('--url', '-u', help='Published CSV URL (default: SHEET_CSV_URL)')
    parser.add_argument('--query', '-q', default='', help='Search term')
    parser.add_argument('--mode', choices=['contains', 'exact'], default=settings.MATCH_MODE)
    parser.add_argument('--field', action='append', help='Column key to search (repeatable)')
    parser.add_argument('--headers', action='store_true', help='Print normalized header keys and exit')
    args = parser.parse_args(argv)

    try:
        text = load_text(args)
    except (OSError, RetrievalError) as e:
        print(f"ERROR: failed to load data: {e}", file=sys.stderr)
        return 1

    result = parse_csv_text(text, settings.REQUIRED_KEY, settings.REQUIRED_HEADERS)
    if args.headers:
        print(', '.join(result.headers))
        return 0
    if not result.schema_ok:
        print(f"ERROR: missing required columns: {', '.join(result.missing_headers)}", file=sys.stderr)
        return 2

    print(f"Loaded {len(result.records)} entries ({result.dropped_rows} malformed rows dropped)")
    matches = filter_records(result.records, args.query, args.field or settings.SEARCH_FIELDS, args.mode)
    if is_empty_query(matches):
        print("No query given. Use --query to search.")
        return 0

    print(f"{len(matches)} match(es) for {args.query!r}")
    for record in matches:
        cols = '  '.join(f"{c['label']}: {record.get(c['key'], '')}" for c in settings.DISPLAY_COLUMNS)
        print(f"  [{record.id}] {cols}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
