#!/usr/bin/env python3
"""Search the configured map area and print new listing previews.

Usage
-----
::

    python scripts/search_listings.py --min-price 2400 --max-price 3200 --min-sqft 700

Configuration comes from ``HS_*`` environment variables (see
``HsConfig.from_env``).

Options::

    --min-price N / --max-price N   Monthly price range
    --min-sqft N                    Minimum square footage
    --json                          Output as machine-readable JSON
    --output FILE                   Write output to FILE instead of stdout
    --verbose                       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyhousesigma import HsClient, HsConfig, HsError, SearchCriteria  # noqa: E402


def _summary_line(listing: dict[str, object]) -> str:
    address = listing.get("address") or listing.get("municipality_name") or "?"
    price = listing.get("price") or listing.get("price_int") or "?"
    return f"{listing.get('id_listing', '?'):<14} {price!s:>10}  {address}"


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Search listings in the configured map area.")
    parser.add_argument("--min-price", type=float, help="Minimum monthly price")
    parser.add_argument("--max-price", type=float, help="Maximum monthly price")
    parser.add_argument("--min-sqft", type=int, help="Minimum square footage")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    if (args.min_price is None) != (args.max_price is None):
        parser.error("--min-price and --max-price must be given together")
    price_range = (args.min_price, args.max_price) if args.min_price is not None else None

    try:
        criteria = SearchCriteria(price_range=price_range, min_square_footage=args.min_sqft)
    except ValueError as exc:
        parser.error(str(exc))

    config = HsConfig.from_env()
    try:
        async with HsClient(config) as client:
            listings = await client.search(criteria)
    except HsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    rows = [listing.raw for listing in listings]
    if args.json_mode:
        text = json.dumps(rows, indent=2, ensure_ascii=False)
    else:
        text = "\n".join(_summary_line(row) for row in rows) or "No new listings."

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
