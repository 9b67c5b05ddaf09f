# gw2_market/prices/filtering.py
"""Select weapon skin items by set name and tag them with set multipliers."""
from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Sequence

__all__ = ["build_skin_pattern", "filter_set_items", "assign_multipliers"]


def build_skin_pattern(sets: Sequence[str], weapon_types: Sequence[str]) -> re.Pattern[str]:
    """
    Compile a pattern matching names like ``"Draconic Short Bow Skin"``.

    Raises:
        ValueError: If either list is empty
    """
    if not sets or not weapon_types:
        raise ValueError("sets and weapon_types must not be empty")

    types_alt = "|".join(re.escape(t) for t in weapon_types)
    return re.compile(
        "|".join(f"(?:{re.escape(name)} (?:{types_alt}) Skin)" for name in sets)
    )


def filter_set_items(items: Iterable[dict], pattern: re.Pattern[str]) -> List[dict]:
    """Items whose name contains a match for ``pattern``."""
    return [item for item in items if pattern.search(item.get("name") or "")]


def assign_multipliers(
        items: Iterable[dict],
        set_multipliers: Mapping[str, int],
        default: int = 1,
) -> List[dict]:
    """
    Copy each item with a ``multiplier`` taken from the set its name starts with.

    When several set names are prefixes of the same item name, the one listed
    last in ``set_multipliers`` wins. Items matching no set get ``default``.
    """
    tagged = []
    for item in items:
        name = item.get("name") or ""
        multiplier = default
        for set_name, value in set_multipliers.items():
            if name.startswith(set_name):
                multiplier = value
        tagged.append({**item, "multiplier": multiplier})
    return tagged
