# tests/prices/test_normalize.py
from __future__ import annotations

import logging

import pytest

from gw2_market.prices.normalize import PricedItem, build_priced_items, normalize_price


def _price(item_id: int, buy: int, sell: int) -> dict:
    return {
        "id": item_id,
        "whitelisted": False,
        "buys": {"quantity": 10, "unit_price": buy},
        "sells": {"quantity": 4, "unit_price": sell},
    }


@pytest.mark.parametrize(
    "raw, multiplier, expected",
    [(100, 2, 50), (100, 1, 100), (5, 2, 3), (7, 3, 2), (0, 3, 0), (1, 2, 1)],
)
def test_normalize_price(raw, multiplier, expected):
    assert normalize_price(raw, multiplier) == expected


def test_normalize_rejects_non_positive_multiplier():
    with pytest.raises(ValueError):
        normalize_price(100, 0)


def test_build_priced_items_joins_by_id():
    items_map = {
        10: {"id": 10, "name": "Dark Wing Axe Skin", "multiplier": 2},
        11: {"id": 11, "name": "Draconic Mace Skin", "multiplier": 3},
    }
    prices = [_price(10, 90, 100), _price(11, 299, 301), _price(99, 1, 1)]

    priced = build_priced_items(items_map, prices)

    assert priced == [
        PricedItem(10, "Dark Wing Axe Skin", 2, 90, 100, 45, 50),
        PricedItem(11, "Draconic Mace Skin", 3, 299, 301, 100, 100),
    ]
    assert priced[0].to_dict()["normalized_sells_for"] == 50


def test_malformed_price_records_are_skipped(caplog):
    caplog.set_level(logging.WARNING)
    items_map = {1: {"id": 1, "name": "X", "multiplier": 1}}

    priced = build_priced_items(items_map, [{"id": 1, "buys": {}, "sells": {"unit_price": 3}}])

    assert priced == []
    assert any("Malformed price record" in r.getMessage() for r in caplog.records)


def test_missing_multiplier_defaults_to_one():
    priced = build_priced_items({1: {"id": 1, "name": "X"}}, [_price(1, 10, 20)])
    assert priced[0].normalized_sells_for == 20
