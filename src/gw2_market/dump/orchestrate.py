# gw2_market/dump/orchestrate.py
"""End-to-end item dump: list ids, fetch in parallel, merge, write."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from gw2_market.config import ApiConfig, DumpConfig
from gw2_market.dump.coordinator import FetchCoordinator
from gw2_market.dump.merge import merge_chunk_results, write_item_cache
from gw2_market.dump.report import format_completion_summary, print_run_summary
from gw2_market.io.api import Gw2Api

logger = logging.getLogger(__name__)

__all__ = ["DumpResult", "dump_items"]


@dataclass(frozen=True)
class DumpResult:
    ids_total: int
    items_written: int
    chunks: int
    empty_chunks: int
    items_path: Path
    items_map_path: Path


def dump_items(
        api_config: ApiConfig,
        config: Optional[DumpConfig] = None,
        *,
        show_progress: bool = True,
) -> DumpResult:
    """
    Refresh the local item cache.

    Orchestrates the full dump:
    1. Lists every item id from ``/items``
    2. Fetches item records in chunks across the worker pool
    3. Deduplicates and sorts the records by id
    4. Writes the item list and the id map to ``config.output_dir``

    Args:
        api_config: API connection settings
        config: Dump settings (defaults to DumpConfig())
        show_progress: Render the live progress line

    Returns:
        DumpResult with counts and output paths
    """
    config = config or DumpConfig()
    start_time = datetime.now()
    logger.info("Starting item dump")

    print_run_summary(base_url=api_config.base_url, config=config, start_time=start_time)

    with Gw2Api(
            api_config,
            strict=config.strict,
            backoff_s=config.backoff_s,
            timeout=config.request_timeout_s,
    ) as api:
        print("Listing item ids... ", end="", flush=True)
        ids = api.fetch_item_ids()
    print(f"{len(ids):,} ids")
    logger.info("Listed %d item ids", len(ids))

    coordinator = FetchCoordinator(ids, api_config, config, show_progress=show_progress)
    results = coordinator.run()

    print("Processing data... ", end="", flush=True)
    items, items_map = merge_chunk_results(results, coordinator.result_chunks)
    print(f"{len(items):,} unique items")

    print("Writing data... ", end="", flush=True)
    write_item_cache(items, items_map, config.items_path, config.items_map_path)
    print("done")

    if len(items) < len(ids):
        logger.warning("Wrote %d items for %d listed ids", len(items), len(ids))

    end_time = datetime.now()
    print(format_completion_summary(
        ids_total=len(ids),
        items_written=len(items),
        chunks=len(results),
        empty_chunks=coordinator.empty_chunks,
        fetch_seconds=coordinator.elapsed_s,
        end_time=end_time,
        total_runtime=end_time - start_time,
    ))

    return DumpResult(
        ids_total=len(ids),
        items_written=len(items),
        chunks=len(results),
        empty_chunks=coordinator.empty_chunks,
        items_path=config.items_path,
        items_map_path=config.items_map_path,
    )
