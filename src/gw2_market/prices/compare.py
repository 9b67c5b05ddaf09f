# gw2_market/prices/compare.py
"""Compare normalized trading-post prices of weapon skin sets."""
from __future__ import annotations

import logging
from typing import List, Optional

from gw2_market.config import ApiConfig, PriceConfig
from gw2_market.dump.merge import load_items
from gw2_market.io.api import Gw2Api

from .display import format_price_table, sort_priced_items
from .filtering import assign_multipliers, build_skin_pattern, filter_set_items
from .normalize import PricedItem, build_priced_items

logger = logging.getLogger(__name__)

__all__ = ["compare_skin_prices"]


def compare_skin_prices(
        api_config: ApiConfig,
        config: Optional[PriceConfig] = None,
        *,
        api: Optional[Gw2Api] = None,
) -> List[PricedItem]:
    """
    Read the item cache, price the configured skin sets, and print the table.

    Args:
        api_config: API connection settings
        config: Price comparison settings (defaults to PriceConfig())
        api: Client to use instead of creating one

    Returns:
        Priced items in the printed order
    """
    config = config or PriceConfig()

    print("Parsing items file... ", end="", flush=True)
    items = load_items(config.items_path)
    print(f"{len(items):,} items")

    print("Filtering items... ", end="", flush=True)
    pattern = build_skin_pattern(config.sets, config.weapon_types)
    set_items = assign_multipliers(filter_set_items(items, pattern), config.multiplier_table())
    set_items_map = {item["id"]: item for item in set_items}
    print(f"{len(set_items):,} skins")
    logger.info("Matched %d skins in %d sets", len(set_items), len(config.sets))

    if not set_items:
        return []

    print("Fetching trading post data... ", end="", flush=True)
    own_api = api is None
    if own_api:
        api = Gw2Api(
            api_config,
            strict=config.strict,
            backoff_s=config.backoff_s,
            timeout=config.request_timeout_s,
        )
    try:
        prices = api.fetch_prices(set_items_map)
    finally:
        if own_api:
            api.close()
    print(f"{len(prices):,} listings")

    priced = sort_priced_items(build_priced_items(set_items_map, prices), config.sort_key)
    print()
    for line in format_price_table(priced, config.color):
        print(line)

    return priced
