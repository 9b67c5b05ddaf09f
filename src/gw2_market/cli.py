# gw2_market/cli.py
"""Command-line entry point: ``gw2-market dump-items`` and ``gw2-market skin-prices``."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gw2_market.config import (
    ConfigurationError,
    DumpConfig,
    MAX_IDS_PER_REQUEST,
    PRICE_SORT_KEYS,
    PriceConfig,
    load_api_config,
)
from gw2_market.dump.orchestrate import dump_items
from gw2_market.io.api import FetchError
from gw2_market.logger import setup_logger
from gw2_market.prices.compare import compare_skin_prices

logger = logging.getLogger(__name__)

__all__ = ["parse_args", "main"]


def _shared_options(defaults: bool) -> argparse.ArgumentParser:
    """
    Options accepted before and after the subcommand.

    The subcommand copy uses SUPPRESS defaults so it only overrides values
    that were actually given after the subcommand name.
    """
    def default(value):
        return value if defaults else argparse.SUPPRESS

    p = argparse.ArgumentParser(add_help=False)
    p.add_argument(
        "--env-file", type=Path, default=default(None),
        help="dotenv file with GW2_API_BASE and GW2_API_TOKEN",
    )
    p.add_argument("--log-dir", type=Path, default=default(None), help="Write a log file into this directory")
    p.add_argument("-v", "--verbose", action="store_true", default=default(False), help="Log at DEBUG level")
    p.add_argument(
        "--strict", action="store_true", default=default(False),
        help="Fail on the first failed request instead of skipping it",
    )
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="gw2-market",
        description="Cache the item catalog and compare trading-post prices of skin sets.",
        parents=[_shared_options(defaults=True)],
    )
    shared = _shared_options(defaults=False)

    sub = p.add_subparsers(dest="command", required=True)

    dump = sub.add_parser(
        "dump-items", parents=[shared], help="Fetch every item and write items.json / items.map.json"
    )
    dump.add_argument("--output-dir", type=Path, default=Path("data"), help="Output directory (default: data)")
    dump.add_argument(
        "--chunk-size", type=int, default=MAX_IDS_PER_REQUEST,
        help=f"Ids per request (default: {MAX_IDS_PER_REQUEST})",
    )
    dump.add_argument("--workers", type=int, default=16, help="Maximum fetch workers (default: 16)")
    dump.add_argument("--threads", action="store_true", help="Use threads instead of processes")
    dump.add_argument(
        "--poll-interval", type=float, default=10.0,
        help="Coordinator poll interval in milliseconds (default: 10)",
    )
    dump.add_argument("--no-progress", action="store_true", help="Hide the live progress line")

    prices = sub.add_parser(
        "skin-prices", parents=[shared], help="Print normalized trading-post prices of skin sets"
    )
    prices.add_argument(
        "--items-file", type=Path, default=Path("data") / "items.json",
        help="Cached item list (default: data/items.json)",
    )
    prices.add_argument("--sort-key", choices=PRICE_SORT_KEYS, default="normalized_sells_for")
    prices.add_argument("--no-color", action="store_true", help="Disable ANSI colors")

    return p.parse_args(argv)


def _run(args: argparse.Namespace) -> None:
    api_config = load_api_config(args.env_file)

    if args.command == "dump-items":
        config = DumpConfig(
            output_dir=args.output_dir,
            chunk_size=args.chunk_size,
            max_workers=args.workers,
            use_threads=args.threads,
            poll_interval_s=args.poll_interval / 1000.0,
            strict=args.strict,
        )
        dump_items(api_config, config, show_progress=not args.no_progress)
    else:
        config = PriceConfig(
            items_path=args.items_file,
            sort_key=args.sort_key,
            color=not args.no_color,
            strict=args.strict,
        )
        compare_skin_prices(api_config, config)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if args.log_dir is not None:
        setup_logger(args.log_dir, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        _run(args)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        logger.error("Invalid argument: %s", exc)
        print(f"Invalid argument: {exc}", file=sys.stderr)
        return 2
    except (FetchError, OSError) as exc:
        logger.exception("Run failed")
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
