"""Parallel item catalog dump."""

from .coordinator import CoordinatorState, FetchCoordinator
from .merge import load_item_map, load_items, merge_chunk_results, write_item_cache
from .orchestrate import DumpResult, dump_items

__all__ = [
    "CoordinatorState",
    "FetchCoordinator",
    "load_item_map",
    "load_items",
    "merge_chunk_results",
    "write_item_cache",
    "DumpResult",
    "dump_items",
]
