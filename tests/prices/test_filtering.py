# tests/prices/test_filtering.py
from __future__ import annotations

import pytest

from gw2_market.config import PriceConfig
from gw2_market.prices.filtering import assign_multipliers, build_skin_pattern, filter_set_items

ITEMS = [
    {"id": 1, "name": "Ice Reaver Axe Skin"},
    {"id": 2, "name": "Dark Wing Short Bow Skin"},
    {"id": 3, "name": "Draconic Warhorn Skin"},
    {"id": 4, "name": "Draconic Helm Skin"},          # not a weapon
    {"id": 5, "name": "Ice Reaver Axe"},              # not a skin
    {"id": 6, "name": "Mystic Forge Stone"},
    {"id": 7, "name": "Defiant Glass Greatsword Skin"},
    {"id": 8},                                         # no name
]


def test_pattern_matches_set_weapon_skins_only():
    pattern = build_skin_pattern(["Ice Reaver", "Dark Wing", "Draconic"], ["Axe", "Short Bow", "Warhorn"])
    matched = filter_set_items(ITEMS, pattern)
    assert [i["id"] for i in matched] == [1, 2, 3]


def test_pattern_escapes_names():
    pattern = build_skin_pattern(["A.B"], ["Axe"])
    assert pattern.search("A.B Axe Skin")
    assert not pattern.search("AxB Axe Skin")


def test_empty_lists_rejected():
    with pytest.raises(ValueError):
        build_skin_pattern([], ["Axe"])
    with pytest.raises(ValueError):
        build_skin_pattern(["Draconic"], [])


def test_default_sets_and_multipliers():
    config = PriceConfig()
    pattern = build_skin_pattern(config.sets, config.weapon_types)
    matched = filter_set_items(ITEMS, pattern)
    assert [i["id"] for i in matched] == [1, 2, 3, 7]

    table = config.multiplier_table()
    assert table["Ice Reaver"] == 1
    assert table["Dark Wing"] == 2
    assert table["Draconic"] == 3
    assert table["Defiant Glass"] == 3

    tagged = assign_multipliers(matched, table)
    assert [i["multiplier"] for i in tagged] == [1, 2, 3, 3]


def test_assign_multipliers_copies_and_defaults():
    items = [{"id": 1, "name": "Unknown Axe Skin"}]
    tagged = assign_multipliers(items, {"Draconic": 3}, default=1)

    assert tagged == [{"id": 1, "name": "Unknown Axe Skin", "multiplier": 1}]
    assert "multiplier" not in items[0]


def test_last_matching_set_wins():
    items = [{"id": 1, "name": "Dark Wing Axe Skin"}]
    tagged = assign_multipliers(items, {"Dark": 5, "Dark Wing": 2})
    assert tagged[0]["multiplier"] == 2
