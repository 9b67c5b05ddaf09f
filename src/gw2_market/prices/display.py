# gw2_market/prices/display.py
"""Terminal table for priced items."""
from __future__ import annotations

from typing import List, Sequence

from gw2_market.config import PRICE_SORT_KEYS as SORT_KEYS

from .normalize import PricedItem

__all__ = ["sort_priced_items", "format_price_table", "SORT_KEYS"]

YELLOW = "\033[33m"
RESET = "\033[0m"


def sort_priced_items(
        items: Sequence[PricedItem],
        sort_key: str = "normalized_sells_for",
) -> List[PricedItem]:
    """Return ``items`` ordered by ``sort_key``, highest first."""
    if sort_key not in SORT_KEYS:
        raise ValueError(f"sort_key must be one of {SORT_KEYS}, got {sort_key!r}")
    return sorted(items, key=lambda item: getattr(item, sort_key), reverse=True)


def format_price_table(items: Sequence[PricedItem], color: bool = True) -> List[str]:
    """
    One aligned line per item, in the order given.

    Columns: name, buy price, normalized buy <=> normalized sell, sell price.
    """
    if not items:
        return []

    columns = ("name", "buys_for", "normalized_buys_for", "normalized_sells_for", "sells_for")
    widths = {col: max(len(str(getattr(item, col))) for item in items) for col in columns}

    def cell(item: PricedItem, col: str) -> str:
        text = str(getattr(item, col)).rjust(widths[col])
        return f"{YELLOW}{text}{RESET}" if color else text

    return [
        f"{item.name.rjust(widths['name'])}: "
        f"{cell(item, 'buys_for')} | {cell(item, 'normalized_buys_for')} <=> "
        f"{cell(item, 'normalized_sells_for')} | {cell(item, 'sells_for')}"
        for item in items
    ]
