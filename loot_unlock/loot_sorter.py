"""
Loot priority ordering.

This is the one ordering used everywhere loot is listed in unlock order:
the unlock level allocator, the validator and the sort endpoint all call
sort_loot_items_by_priority. Do not re-implement the comparison elsewhere.

Order (first unlock to last):
    1. monster drop stage, Beginner -> Endgame, items without a stage last
    2. loot category priority, craft primary (7) first, unknown (0) last
    3. lower valuation first, missing valuation last
    4. lower sell price first, missing sell price last
    5. lower tier first (basic < common < ... < mythic), missing tier last
    6. name, case-insensitive
"""

import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

from loot_unlock.catalog_loader import catalog_key
from loot_unlock.unlock_rules import (
    DROP_STAGE_ORDER,
    LOOT_CATEGORY_PRIORITIES,
    MISSING_RANK,
    TIER_ORDER,
    UNKNOWN_CATEGORY_PRIORITY,
)


def lookup_catalog_item(loot_item: Mapping[str, Any], catalog: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    if not loot_item or not catalog:
        return None
    name = loot_item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return catalog.get(catalog_key(name))


def drop_stage_rank(stage: Optional[str]) -> int:
    return DROP_STAGE_ORDER.get((stage or "").strip().lower(), MISSING_RANK)


def tier_rank(tier: Optional[str]) -> int:
    return TIER_ORDER.get((tier or "").strip().lower(), MISSING_RANK)


def loot_category_priority(category: Optional[str]) -> int:
    return LOOT_CATEGORY_PRIORITIES.get((category or "").strip().lower(), UNKNOWN_CATEGORY_PRIORITY)


def _price(value: Any) -> float:
    if value is None:
        return math.inf
    return value


def loot_priority_key(loot_item: Mapping[str, Any], catalog: Optional[Mapping[str, Any]]) -> Tuple:
    entry = lookup_catalog_item(loot_item, catalog) or {}
    attributes = entry.get("attributes") or {}

    name = catalog_key(loot_item.get("name"))

    return (
        drop_stage_rank(attributes.get("monster_drop_stage")),
        -loot_category_priority(attributes.get("loot_category")),
        _price(entry.get("valuation")),
        _price(entry.get("sell_price")),
        tier_rank(entry.get("tier")),
        name,
        # full ties (same item listed twice) must not depend on input order
        loot_item.get("chance") or 0,
        loot_item.get("count_max") or 0,
        str(loot_item.get("origin") or ""),
    )


def priority_order(loot_items: List[Mapping[str, Any]], catalog: Optional[Mapping[str, Any]]) -> List[int]:
    """Positions of loot_items in priority order."""
    return sorted(range(len(loot_items)), key=lambda i: loot_priority_key(loot_items[i], catalog))


def sort_loot_items_by_priority(loot_items: Optional[List[Dict[str, Any]]], catalog: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    if not loot_items or not isinstance(loot_items, list):
        return []
    return [loot_items[i] for i in priority_order(loot_items, catalog)]


def sort_loot_by_unlock_level(loot_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Items without an unlock level first, then lowest level first."""

    def key(item):
        level = item.get("unlock_level")
        if level is None:
            return (0, 0)
        return (1, level)

    return sorted(loot_items, key=key)
