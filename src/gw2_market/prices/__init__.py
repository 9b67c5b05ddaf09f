"""Trading-post price comparison for weapon skin sets."""

from .compare import compare_skin_prices
from .display import format_price_table, sort_priced_items
from .filtering import assign_multipliers, build_skin_pattern, filter_set_items
from .normalize import PricedItem, build_priced_items, normalize_price

__all__ = [
    "compare_skin_prices",
    "format_price_table",
    "sort_priced_items",
    "assign_multipliers",
    "build_skin_pattern",
    "filter_set_items",
    "PricedItem",
    "build_priced_items",
    "normalize_price",
]
