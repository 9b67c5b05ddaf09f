# gw2_market/dump/report.py
"""Run summaries for the item dump."""
from __future__ import annotations

import logging
from datetime import datetime

from gw2_market.config import DumpConfig

logger = logging.getLogger(__name__)

__all__ = ["format_run_summary", "print_run_summary", "format_completion_summary"]

LINE_WIDTH = 100


def _abbrev(s: str, width: int = 80) -> str:
    """Truncate string with ellipsis if it exceeds width."""
    return s if len(s) <= width else s[: width - 1] + "…"


def format_run_summary(
        *,
        base_url: str,
        config: DumpConfig,
        start_time: datetime,
) -> str:
    """Describe the planned dump before any item pages are fetched."""
    lines = [
        "ITEM CATALOG DUMP",
        "━" * LINE_WIDTH,
        f"Start Time: {start_time:%Y-%m-%d %H:%M:%S}",
        "",
        "Configuration",
        "═" * LINE_WIDTH,
        f"API base:             {_abbrev(base_url)}",
        f"Items file:           {config.items_path}",
        f"Items map file:       {config.items_map_path}",
        f"Chunk size:           {config.chunk_size}",
        f"Max workers:          {config.max_workers}",
        f"Worker type:          {'threads' if config.use_threads else 'processes'}",
        f"Poll interval:        {config.poll_interval_s * 1000:.0f} ms",
        f"Strict mode:          {config.strict}",
        "",
    ]
    return "\n".join(lines) + "\n"


def print_run_summary(**kwargs) -> None:
    print(format_run_summary(**kwargs), end="")
    logger.info("Dump configuration: %s", kwargs.get("config"))


def format_completion_summary(
        *,
        ids_total: int,
        items_written: int,
        chunks: int,
        empty_chunks: int,
        fetch_seconds: float,
        end_time: datetime,
        total_runtime,
) -> str:
    lines = [
        "",
        "Dump Summary",
        "═" * LINE_WIDTH,
        f"Item ids listed:      {ids_total:,}",
        f"Items written:        {items_written:,}",
        f"Chunks fetched:       {chunks:,}",
        f"Empty chunks:         {empty_chunks:,}",
        f"Fetch time:           {fetch_seconds:.2f}s",
        f"End Time:             {end_time:%Y-%m-%d %H:%M:%S}",
        f"Total Runtime:        {total_runtime}",
    ]
    if items_written < ids_total:
        lines.append(f"Missing items:        {ids_total - items_written:,}")
    return "\n".join(lines)
