from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from loot_unlock.catalog_loader import build_catalog, catalog_key
from loot_unlock.loot_sorter import loot_priority_key, sort_loot_by_unlock_level, sort_loot_items_by_priority
from loot_unlock.loot_validator import validate_monster_loot
from loot_unlock.models.loot_models import CatalogItem, LootItem, Monster
from loot_unlock.reward_curves import budget_per_level
from loot_unlock.unlock_engine import (
    calculate_expected_value,
    calculate_monster_unlock_levels,
    calculate_unlock_levels_map,
)


def resolve_catalog(request_catalog: Optional[List[CatalogItem]], default_catalog: Optional[dict]) -> dict:
    """Request catalog wins over the configured one; having neither is a 400."""
    if request_catalog is not None:
        return build_catalog(request_catalog)
    if default_catalog is None:
        raise HTTPException(400, "No item catalog supplied and none configured")
    return default_catalog


def resolve_cap(request_cap: Optional[int], default_cap: int) -> int:
    return default_cap if request_cap is None else request_cap


def sorted_loot(loot: List[LootItem], catalog: dict) -> List[Dict[str, Any]]:
    items = [item.model_dump() for item in loot]
    ordered = sort_loot_items_by_priority(items, catalog)

    results = []
    for position, item in enumerate(ordered):
        key = loot_priority_key(item, catalog)
        results.append({
            **item,
            "position": position,
            "expected_value": calculate_expected_value(item, catalog),
            "in_catalog": catalog_key(item["name"]) in catalog,
            "drop_stage_rank": key[0],
            "loot_category_priority": -key[1],
        })
    return results


def monster_unlock_levels(monster: Monster, catalog: dict, cap: int) -> Dict[str, Any]:
    data = monster.model_dump()
    loot = calculate_monster_unlock_levels(data, catalog, cap)
    return {
        "budget_per_level": budget_per_level(data["power"], data["resource_balance"]),
        "max_unlock_level": cap,
        "loot": loot,
        "display_order": [item["name"] for item in sort_loot_by_unlock_level(loot)],
    }


def unlock_levels_map(loot: List[LootItem], power: float, resource_balance: str, catalog: dict, cap: int) -> Dict[str, Any]:
    items = [item.model_dump() for item in loot]
    return {
        "budget_per_level": budget_per_level(power, resource_balance),
        "max_unlock_level": cap,
        "unlock_levels": calculate_unlock_levels_map(items, power, resource_balance, catalog, cap),
    }


def validate_monster(monster: Monster, catalog: dict, cap: int) -> Dict[str, Any]:
    return validate_monster_loot(monster.model_dump(), catalog, cap)
