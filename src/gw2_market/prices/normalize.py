# gw2_market/prices/normalize.py
"""Combine items with trading-post prices and normalize by set multiplier."""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Iterable, List, Mapping

logger = logging.getLogger(__name__)

__all__ = ["PricedItem", "normalize_price", "build_priced_items"]


def normalize_price(raw: int, multiplier: int) -> int:
    """
    Divide a price by its multiplier, rounding halves up.

    Examples:
        >>> normalize_price(100, 2)
        50
        >>> normalize_price(5, 2)
        3
    """
    if multiplier <= 0:
        raise ValueError(f"multiplier must be positive, got {multiplier}")
    return math.floor(raw / multiplier + 0.5)


@dataclass(frozen=True)
class PricedItem:
    id: int
    name: str
    multiplier: int
    buys_for: int
    sells_for: int
    normalized_buys_for: int
    normalized_sells_for: int

    def to_dict(self) -> dict:
        return asdict(self)


def build_priced_items(
        items_map: Mapping[int, dict],
        prices: Iterable[dict],
) -> List[PricedItem]:
    """
    Join price records to items by id.

    Price records for ids missing from ``items_map`` and records without
    buy/sell unit prices are skipped.
    """
    priced: List[PricedItem] = []
    for record in prices:
        item = items_map.get(record.get("id"))
        if item is None:
            logger.debug("No item for price record %s", record.get("id"))
            continue

        try:
            buys_for = int(record["buys"]["unit_price"])
            sells_for = int(record["sells"]["unit_price"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed price record for %s: %s", record.get("id"), exc)
            continue

        multiplier = int(item.get("multiplier", 1))
        priced.append(PricedItem(
            id=item["id"],
            name=item.get("name", ""),
            multiplier=multiplier,
            buys_for=buys_for,
            sells_for=sells_for,
            normalized_buys_for=normalize_price(buys_for, multiplier),
            normalized_sells_for=normalize_price(sells_for, multiplier),
        ))
    return priced
