import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from loot_unlock.catalog_loader import catalog_key
from loot_unlock.loot_sorter import lookup_catalog_item, priority_order
from loot_unlock.reward_curves import budget_per_level as compute_budget_per_level
from loot_unlock.unlock_rules import GOLD_COIN_NAMES, MAX_ITERATIONS, MAX_UNLOCK_LEVEL, NO_UNLOCK_CAP

LOG = logging.getLogger(__name__)


def is_gold_coin(loot_item: Mapping[str, Any]) -> bool:
    name = loot_item.get("name")
    return isinstance(name, str) and catalog_key(name) in GOLD_COIN_NAMES


def calculate_expected_value(loot_item: Optional[Mapping[str, Any]], catalog: Optional[Mapping[str, Any]]) -> int:
    """
    Expected gold a single kill yields for one loot entry.

    value * (chance / 100) * quantity, where value is the catalog valuation
    (falling back to sell price) and quantity is half the max stack.
    """
    entry = lookup_catalog_item(loot_item, catalog)
    if not entry:
        return 0

    value = entry.get("valuation")
    if value is None:
        value = entry.get("sell_price")
    if value is None:
        value = 0

    count_max = loot_item.get("count_max")
    if count_max is None:
        return 0

    if count_max == 0:
        quantity = 0
    elif count_max == 1:
        quantity = 1
    else:
        quantity = math.floor(count_max / 2)

    chance = loot_item.get("chance") or 0

    return math.floor(value * (chance / 100) * quantity)


def allocate_unlock_levels(
    sorted_loot: List[Mapping[str, Any]],
    budget_per_level: float,
    catalog: Optional[Mapping[str, Any]],
    max_unlock_level: int = MAX_UNLOCK_LEVEL,
) -> List[int]:
    """
    Greedy budget walk over priority-sorted loot.

    Returns one unlock level per item, in the order given.
    """
    if budget_per_level <= 0:
        LOG.warning("budget_per_level is %s, every item unlocks at level 0", budget_per_level)
        return [0] * len(sorted_loot)

    has_cap = max_unlock_level != NO_UNLOCK_CAP
    cumulative_cost = 0
    current_level = 0
    levels = []

    for index, loot_item in enumerate(sorted_loot):
        cumulative_cost += calculate_expected_value(loot_item, catalog)

        iterations = 0
        while cumulative_cost > budget_per_level and (not has_cap or current_level < max_unlock_level):
            if iterations >= MAX_ITERATIONS:
                LOG.error(
                    "runaway unlock level for item %r at index %d: cumulative_cost=%s budget_per_level=%s level=%d",
                    loot_item.get("name"), index, cumulative_cost, budget_per_level, current_level,
                )
                break
            current_level += 1
            cumulative_cost -= budget_per_level
            iterations += 1

        levels.append(current_level)

    return levels


def _walk(loot_items, budget, catalog, max_unlock_level):
    """Levels for the non-gold entries, keyed by their position in loot_items."""
    positions = [i for i, item in enumerate(loot_items) if not is_gold_coin(item)]
    walk_items = [loot_items[i] for i in positions]
    order = priority_order(walk_items, catalog)
    sorted_loot = [walk_items[k] for k in order]
    levels = allocate_unlock_levels(sorted_loot, budget, catalog, max_unlock_level)
    return [(positions[k], level) for k, level in zip(order, levels)]


def calculate_monster_unlock_levels(
    monster: Optional[Mapping[str, Any]],
    catalog: Optional[Mapping[str, Any]],
    max_unlock_level: int = MAX_UNLOCK_LEVEL,
) -> List[Dict[str, Any]]:
    if not monster or not monster.get("loot"):
        LOG.warning("monster has no loot, nothing to unlock")
        return []

    loot = monster["loot"]
    catalog = catalog or {}
    budget = compute_budget_per_level(monster.get("power"), monster.get("resource_balance"))

    LOG.debug(
        "unlock levels for %s: power=%s budget_per_level=%s loot=%d",
        monster.get("name"), monster.get("power"), budget, len(loot),
    )

    level_by_position = dict(_walk(loot, budget, catalog, max_unlock_level))

    return [
        {**item, "unlock_level": level_by_position.get(position, 0)}
        for position, item in enumerate(loot)
    ]


def calculate_unlock_levels_map(
    loot_items: Optional[List[Mapping[str, Any]]],
    power: Optional[float],
    resource_balance: Optional[str],
    catalog: Optional[Mapping[str, Any]],
    max_unlock_level: int = MAX_UNLOCK_LEVEL,
) -> Dict[str, int]:
    """Item name key (see catalog_key) -> unlock level. Same levels as the list form."""
    if not loot_items:
        return {}

    catalog = catalog or {}
    budget = compute_budget_per_level(power, resource_balance)

    unlock_levels = {}
    for position, level in _walk(loot_items, budget, catalog, max_unlock_level):
        name = loot_items[position].get("name")
        if isinstance(name, str):
            unlock_levels[catalog_key(name)] = level

    # gold coins never enter the walk
    for loot_item in loot_items:
        name = loot_item.get("name")
        if isinstance(name, str):
            unlock_levels.setdefault(catalog_key(name), 0)

    return unlock_levels
