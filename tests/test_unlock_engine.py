import copy
import logging

from loot_unlock.catalog_loader import build_catalog
from loot_unlock.loot_sorter import sort_loot_items_by_priority
from loot_unlock.unlock_engine import (
    allocate_unlock_levels,
    calculate_expected_value,
    calculate_monster_unlock_levels,
    calculate_unlock_levels_map,
    is_gold_coin,
)
from loot_unlock.unlock_rules import MAX_ITERATIONS


def _catalog() -> dict:
    return build_catalog([
        {"name": "Sword", "valuation": 1000, "tier": "rare",
         "attributes": {"monster_drop_stage": "Intermediate", "loot_category": "general"}},
        {"name": "Gold Coin", "valuation": 1, "tier": "basic",
         "attributes": {"monster_drop_stage": "Beginner", "loot_category": "general"}},
        {"name": "Wolf Pelt", "valuation": 30, "tier": "common",
         "attributes": {"monster_drop_stage": "Beginner", "loot_category": "race"}},
        {"name": "Iron Ore", "valuation": None, "sell_price": 12, "tier": "basic",
         "attributes": {"monster_drop_stage": "Beginner", "loot_category": "craft primary"}},
        {"name": "Moon Gem", "valuation": 9000, "tier": "legendary",
         "attributes": {"monster_drop_stage": "Endgame", "loot_category": "legendary"}},
        {"name": "Worthless Rock", "tier": "basic",
         "attributes": {"monster_drop_stage": "Beginner", "loot_category": "general"}},
    ])


def _wolf(power=10, resource_balance="Equals") -> dict:
    return {
        "name": "Wolf",
        "power": power,
        "resource_balance": resource_balance,
        "loot": [
            {"name": "Gold Coin", "chance": 100, "count_max": 20},
            {"name": "Moon Gem", "chance": 0.5, "count_max": 1},
            {"name": "Wolf Pelt", "chance": 60, "count_max": 2, "origin": "race"},
            {"name": "Iron Ore", "chance": 25, "count_max": 6, "origin": "craft primary"},
            {"name": "Sword", "chance": 10, "count_max": 1},
            {"name": "Mystery Box", "chance": 5, "count_max": 1},
        ],
    }


# ============================================================
# Expected value
# ============================================================

def test_expected_value_uses_half_the_stack() -> None:
    catalog = _catalog()
    assert calculate_expected_value({"name": "Sword", "chance": 10, "count_max": 1}, catalog) == 100
    assert calculate_expected_value({"name": "Sword", "chance": 10, "count_max": 0}, catalog) == 0
    assert calculate_expected_value({"name": "Sword", "chance": 10, "count_max": 5}, catalog) == 200
    assert calculate_expected_value({"name": "Sword", "chance": 10, "count_max": 2}, catalog) == 100


def test_expected_value_falls_back_to_sell_price() -> None:
    catalog = _catalog()
    assert calculate_expected_value({"name": "Iron Ore", "chance": 25, "count_max": 6}, catalog) == 9
    assert calculate_expected_value({"name": "Worthless Rock", "chance": 50, "count_max": 1}, catalog) == 0


def test_expected_value_is_zero_for_missing_data() -> None:
    catalog = _catalog()
    assert calculate_expected_value({"name": "Mystery Box", "chance": 5, "count_max": 1}, catalog) == 0
    assert calculate_expected_value({"name": "Sword", "chance": 10}, catalog) == 0
    assert calculate_expected_value({"name": "Sword", "count_max": 1}, catalog) == 0
    assert calculate_expected_value({"chance": 10, "count_max": 1}, catalog) == 0
    assert calculate_expected_value(None, catalog) == 0
    assert calculate_expected_value({"name": "Sword", "chance": 10, "count_max": 1}, None) == 0


# ============================================================
# Budget walk
# ============================================================

def test_single_item_over_budget_moves_one_level() -> None:
    catalog = {"sword": {"name": "Sword", "valuation": 1000}}
    sword = {"name": "Sword", "chance": 10, "count_max": 1}

    assert allocate_unlock_levels([sword], 50, catalog) == [1]


def test_walk_carries_remaining_cost_forward() -> None:
    catalog = {"sword": {"name": "Sword", "valuation": 1000}}
    sword = {"name": "Sword", "chance": 10, "count_max": 1}

    # 100, 200, 300 cumulative against a budget of 50 per level
    assert allocate_unlock_levels([sword, sword, sword], 50, catalog) == [1, 3, 5]


def test_non_positive_budget_unlocks_everything_at_zero(caplog) -> None:
    catalog = {"sword": {"name": "Sword", "valuation": 1000}}
    sword = {"name": "Sword", "chance": 10, "count_max": 1}

    with caplog.at_level(logging.WARNING):
        assert allocate_unlock_levels([sword, sword], 0, catalog) == [0, 0]
        assert allocate_unlock_levels([sword], -1.5, catalog) == [0]

    assert "budget_per_level" in caplog.text


def test_cap_clamps_levels() -> None:
    catalog = {"sword": {"name": "Sword", "valuation": 1000}}
    sword = {"name": "Sword", "chance": 10, "count_max": 1}

    assert allocate_unlock_levels([sword, sword, sword], 50, catalog, max_unlock_level=2) == [1, 2, 2]
    assert allocate_unlock_levels([sword], 50, catalog, max_unlock_level=0) == [0]


def test_runaway_walk_is_bounded_and_logged(caplog) -> None:
    catalog = {"moon gem": {"name": "Moon Gem", "valuation": 10_000_000}}
    gem = {"name": "Moon Gem", "chance": 100, "count_max": 1}

    with caplog.at_level(logging.ERROR):
        levels = allocate_unlock_levels([gem], 0.5, catalog)

    assert levels == [MAX_ITERATIONS]
    assert "runaway unlock level" in caplog.text
    assert "Moon Gem" in caplog.text


# ============================================================
# List form
# ============================================================

def test_gold_coins_always_unlock_at_zero() -> None:
    monster = _wolf()
    monster["loot"].append({"name": "GOLD COINS", "chance": 100, "count_max": 50})

    result = calculate_monster_unlock_levels(monster, _catalog())

    for item in result:
        if is_gold_coin(item):
            assert item["unlock_level"] == 0


def test_list_form_keeps_original_order_and_fields() -> None:
    monster = _wolf()
    result = calculate_monster_unlock_levels(monster, _catalog())

    assert [item["name"] for item in result] == [item["name"] for item in monster["loot"]]
    assert result[2]["origin"] == "race"
    assert all("unlock_level" in item for item in result)
    assert all("unlock_level" not in item for item in monster["loot"])


def test_list_form_levels() -> None:
    result = {item["name"]: item["unlock_level"] for item in calculate_monster_unlock_levels(_wolf(), _catalog())}

    # budget 4.74: Iron Ore 9 -> 1, Wolf Pelt +18 -> 5, Sword +100 -> 26,
    # Moon Gem +45 -> 36, Mystery Box (not in catalog) +0 -> 36
    assert result == {
        "Gold Coin": 0,
        "Iron Ore": 1,
        "Wolf Pelt": 5,
        "Sword": 26,
        "Mystery Box": 36,
        "Moon Gem": 36,
    }


def test_levels_never_decrease_along_priority_order() -> None:
    monster = _wolf()
    catalog = _catalog()
    result = calculate_monster_unlock_levels(monster, catalog)
    ordered = sort_loot_items_by_priority([i for i in result if not is_gold_coin(i)], catalog)

    levels = [item["unlock_level"] for item in ordered]
    assert levels == sorted(levels)


def test_list_form_is_deterministic() -> None:
    first = calculate_monster_unlock_levels(_wolf(), _catalog())
    second = calculate_monster_unlock_levels(_wolf(), _catalog())
    assert first == second


def test_list_form_respects_cap() -> None:
    result = calculate_monster_unlock_levels(_wolf(), _catalog(), max_unlock_level=10)
    assert max(item["unlock_level"] for item in result) == 10

    uncapped = calculate_monster_unlock_levels(_wolf(), _catalog(), max_unlock_level=-1)
    assert max(item["unlock_level"] for item in uncapped) > 10


def test_power_zero_budget_gives_all_zero() -> None:
    result = calculate_monster_unlock_levels(_wolf(power=0), _catalog())
    assert [item["unlock_level"] for item in result] == [0] * 6


def test_monster_without_loot() -> None:
    assert calculate_monster_unlock_levels({"power": 5, "loot": []}, _catalog()) == []
    assert calculate_monster_unlock_levels(None, _catalog()) == []


def test_catalog_none_means_no_cost() -> None:
    result = calculate_monster_unlock_levels(_wolf(), None)
    assert [item["unlock_level"] for item in result] == [0] * 6


def test_input_not_mutated() -> None:
    monster = _wolf()
    catalog = _catalog()
    monster_before = copy.deepcopy(monster)
    catalog_before = copy.deepcopy(catalog)

    calculate_monster_unlock_levels(monster, catalog)
    calculate_unlock_levels_map(monster["loot"], 10, "Equals", catalog)

    assert monster == monster_before
    assert catalog == catalog_before


# ============================================================
# Map form
# ============================================================

def test_map_form_agrees_with_list_form() -> None:
    for power, balance, cap in [(10, "Equals", -1), (12, "Loot3", -1), (10, "Loot1", 7), (0, "Equals", -1)]:
        monster = _wolf(power, balance)
        listed = calculate_monster_unlock_levels(monster, _catalog(), cap)
        mapped = calculate_unlock_levels_map(monster["loot"], power, balance, _catalog(), cap)

        for item in listed:
            assert mapped[item["name"].lower()] == item["unlock_level"]


def test_map_form_has_every_name() -> None:
    monster = _wolf()
    mapped = calculate_unlock_levels_map(monster["loot"], 10, "Equals", _catalog())

    assert set(mapped) == {item["name"].lower() for item in monster["loot"]}
    assert mapped["gold coin"] == 0


def test_map_form_empty_input() -> None:
    assert calculate_unlock_levels_map([], 10, "Equals", _catalog()) == {}
    assert calculate_unlock_levels_map(None, 10, "Equals", _catalog()) == {}


def test_map_form_non_positive_budget() -> None:
    monster = _wolf()
    mapped = calculate_unlock_levels_map(monster["loot"], 0, "Equals", _catalog())
    assert set(mapped.values()) == {0}


# ============================================================
# Repeated entries and padded names
# ============================================================

def test_repeated_entry_gets_a_level_per_position() -> None:
    catalog = _catalog()
    sword = {"name": "Sword", "chance": 10, "count_max": 1}
    monster = {"name": "Wolf", "power": 10, "loot": [sword, sword]}

    result = calculate_monster_unlock_levels(monster, catalog)
    walked = allocate_unlock_levels([sword, sword], 4.74, catalog)

    assert [item["unlock_level"] for item in result] == walked
    assert walked[0] < walked[1]


def test_padded_names_find_their_catalog_entry() -> None:
    catalog = build_catalog([{"name": " Sword ", "valuation": 1000}])
    padded = {"name": " Sword ", "chance": 10, "count_max": 1}
    plain = {"name": "Sword", "chance": 10, "count_max": 1}

    assert calculate_expected_value(padded, catalog) == 100

    padded_levels = calculate_monster_unlock_levels({"power": 10, "loot": [padded]}, catalog)
    plain_levels = calculate_monster_unlock_levels({"power": 10, "loot": [plain]}, catalog)
    assert padded_levels[0]["unlock_level"] == plain_levels[0]["unlock_level"] > 0

    mapped = calculate_unlock_levels_map([padded], 10, "Equals", catalog)
    assert mapped == {"sword": plain_levels[0]["unlock_level"]}
