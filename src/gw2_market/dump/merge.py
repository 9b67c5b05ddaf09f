# gw2_market/dump/merge.py
"""Collapse chunk results into the sorted item cache and persist it."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

__all__ = ["merge_chunk_results", "write_item_cache", "load_items", "load_item_map"]


def merge_chunk_results(
        results: Mapping[int, Any],
        chunk_order: Optional[Mapping[int, int]] = None,
) -> Tuple[List[dict], Dict[int, dict]]:
    """
    Flatten chunk payloads into a deduplicated list sorted by id.

    Chunks that are not lists (failed fetches, error bodies) and records
    without an integer ``id`` are skipped. When an id appears more than once
    the record from the lowest chunk index wins. Chunk indices come from
    ``chunk_order`` (sequence index -> chunk index); results without an
    entry there are ranked by their sequence index. With ``chunk_order``
    given, the outcome does not depend on the order in which results
    arrived.

    Args:
        results: Sequence index -> list of item records
        chunk_order: Sequence index -> chunk index the payload was fetched for

    Returns:
        (items sorted by ascending id, mapping of id -> item)
    """
    chunk_order = chunk_order or {}
    items_map: Dict[int, dict] = {}
    skipped = 0

    for index in sorted(results, key=lambda seq: (chunk_order.get(seq, seq), seq)):
        chunk = results[index]
        if not isinstance(chunk, list):
            skipped += 1
            continue
        for item in chunk:
            item_id = item.get("id") if isinstance(item, dict) else None
            if not isinstance(item_id, int) or isinstance(item_id, bool):
                continue
            items_map.setdefault(item_id, item)

    if skipped:
        logger.warning("Skipped %d chunk results without item lists", skipped)

    items = [items_map[item_id] for item_id in sorted(items_map)]
    return items, {item["id"]: item for item in items}


def _write_json(path: Path, document: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    with tmp.open("w", encoding="utf-8") as fh:
        json.dump(document, fh, ensure_ascii=False)
    tmp.replace(path)


def write_item_cache(
        items: List[dict],
        items_map: Mapping[int, dict],
        items_path: str | Path,
        items_map_path: str | Path,
) -> None:
    """
    Write the item list and the id -> item map as two JSON documents.

    Map keys become strings, as JSON requires.
    """
    items_path = Path(items_path)
    items_map_path = Path(items_map_path)

    _write_json(items_path, items)
    _write_json(items_map_path, {str(k): v for k, v in items_map.items()})
    logger.info("Wrote %d items to %s and %s", len(items), items_path, items_map_path)


def load_items(items_path: str | Path) -> List[dict]:
    """Read the cached item list."""
    with Path(items_path).open("r", encoding="utf-8") as fh:
        items = json.load(fh)
    if not isinstance(items, list):
        raise ValueError(f"{items_path} does not contain an item list")
    return items


def load_item_map(items_map_path: str | Path) -> Dict[int, dict]:
    """Read the cached id -> item map with integer keys."""
    with Path(items_map_path).open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    return {int(k): v for k, v in raw.items()}
