import math
from typing import Any, Dict, List, Mapping, Optional

from loot_unlock.loot_sorter import lookup_catalog_item
from loot_unlock.reward_curves import budget_per_level as compute_budget_per_level
from loot_unlock.unlock_engine import calculate_monster_unlock_levels, calculate_unlock_levels_map, is_gold_coin
from loot_unlock.unlock_rules import (
    DROP_STAGE_ORDER,
    LAST_UNLOCK_LEVEL_FACTOR,
    LAST_UNLOCK_MAX_DEVIATION,
    LOOT_CATEGORY_PRIORITIES,
    MAX_UNLOCK_LEVEL,
    POWER_MAX,
    POWER_MIN,
    TIER_ORDER,
)


def validate_monster_loot(
    monster: Any,
    catalog: Optional[Mapping[str, Any]],
    max_unlock_level: int = MAX_UNLOCK_LEVEL,
) -> Dict[str, Any]:
    errors: List[Dict[str, str]] = []
    warnings: List[Dict[str, str]] = []
    catalog = catalog or {}

    summary = {
        "total_items": 0,
        "catalog_hits": 0,
        "catalog_misses": 0,
        "budget_per_level": None,
        "current_last_unlock_level": 0,
        "recommended_last_unlock_level": None,
        "stale_unlock_levels": 0,
        "computed_unlock_levels": {},
    }

    # ---- top-level must be dict ----
    if not isinstance(monster, dict):
        errors.append({
            "path": "$",
            "message": "Monster must be an object/dict."
        })
        return {"valid": False, "errors": errors, "warnings": warnings, "summary": summary}

    loot = monster.get("loot", [])
    if not isinstance(loot, list):
        errors.append({
            "path": "$.loot",
            "message": "loot must be a list of loot item objects."
        })
        return {"valid": False, "errors": errors, "warnings": warnings, "summary": summary}

    # ---- power ----
    power = monster.get("power") or 0
    if not isinstance(power, (int, float)) or power < POWER_MIN or power > POWER_MAX:
        errors.append({
            "path": "$.power",
            "message": f"power must be a number between {POWER_MIN} and {POWER_MAX}."
        })
        return {"valid": False, "errors": errors, "warnings": warnings, "summary": summary}

    resource_balance = monster.get("resource_balance") or ""
    no_loot = bool(monster.get("no_loot"))

    if no_loot and "Loot" in resource_balance:
        errors.append({
            "path": "$.no_loot",
            "message": f"Monster is flagged no_loot but its resource balance is '{resource_balance}'."
        })

    budget = compute_budget_per_level(power, monster.get("resource_balance"))
    summary["budget_per_level"] = budget
    if budget <= 0:
        warnings.append({
            "path": "$.power",
            "message": f"Budget per level is {budget}; every item unlocks at level 0."
        })

    # ---- walk loot entries ----
    valid_loot = []
    for i, item in enumerate(loot):
        path = f"$.loot[{i}]"

        if not isinstance(item, dict):
            errors.append({
                "path": path,
                "message": "Loot item must be an object/dict."
            })
            continue

        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append({
                "path": f"{path}.name",
                "message": "Loot item name must be a non-empty string."
            })
            continue

        valid_loot.append((i, item))
        summary["total_items"] += 1

        if is_gold_coin(item):
            continue

        entry = lookup_catalog_item(item, catalog)
        if entry is None:
            summary["catalog_misses"] += 1
            warnings.append({
                "path": f"{path}.name",
                "message": f"'{name}' is not in the item catalog; it adds nothing to the unlock budget."
            })
            continue

        summary["catalog_hits"] += 1
        attributes = entry.get("attributes") or {}

        tier = (entry.get("tier") or "").strip().lower()
        if tier not in TIER_ORDER:
            warnings.append({
                "path": f"{path}.name",
                "message": f"'{name}' has unknown tier '{entry.get('tier')}'. Allowed: {list(TIER_ORDER)}"
            })

        stage = (attributes.get("monster_drop_stage") or "").strip().lower()
        if stage not in DROP_STAGE_ORDER:
            warnings.append({
                "path": f"{path}.name",
                "message": f"'{name}' has unknown monster drop stage '{attributes.get('monster_drop_stage')}'."
            })

        category = (attributes.get("loot_category") or "").strip().lower()
        if category not in LOOT_CATEGORY_PRIORITIES:
            warnings.append({
                "path": f"{path}.name",
                "message": f"'{name}' has unknown loot category '{attributes.get('loot_category')}'."
            })

    # ---- compare stored unlock levels with fresh ones ----
    valid_items = [item for _, item in valid_loot]
    computed = calculate_monster_unlock_levels({**monster, "loot": valid_items}, catalog, max_unlock_level)
    summary["computed_unlock_levels"] = calculate_unlock_levels_map(
        valid_items, power, monster.get("resource_balance"), catalog, max_unlock_level
    )

    for (i, item), fresh in zip(valid_loot, computed):
        stored = item.get("unlock_level")

        if stored is None:
            warnings.append({
                "path": f"$.loot[{i}].unlock_level",
                "message": f"Missing unlock_level; computed value is {fresh['unlock_level']}."
            })
        elif stored != fresh["unlock_level"]:
            summary["stale_unlock_levels"] += 1
            warnings.append({
                "path": f"$.loot[{i}].unlock_level",
                "message": f"Stored unlock_level {stored} differs from computed {fresh['unlock_level']}."
            })

    # ---- last unlock level ----
    stored_levels = [
        item["unlock_level"] for _, item in valid_loot
        if isinstance(item.get("unlock_level"), (int, float))
    ]
    current_last = max(stored_levels) if stored_levels else 0
    summary["current_last_unlock_level"] = current_last

    default_level = monster.get("default_level")
    if default_level and not no_loot:
        recommended = math.ceil(default_level * LAST_UNLOCK_LEVEL_FACTOR)
        summary["recommended_last_unlock_level"] = recommended

        if recommended > 0:
            difference = recommended - current_last
            deviation = -((difference / recommended) * 100)
            if deviation < LAST_UNLOCK_MAX_DEVIATION:
                errors.append({
                    "path": "$.loot",
                    "message": (
                        f"Last unlock level {current_last} is below recommended {recommended} "
                        f"({round(deviation, 2)}%). Missing {difference} levels."
                    )
                })

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "summary": summary,
    }
