"""
Power-indexed reward curves.

Every function here is a closed-form curve of a monster's power (0-15).
The constants are calibration values shared with the monster validators,
so they are kept exactly as tuned, including the small additive offsets.
"""

import math
import re
from typing import Any, Dict, Optional

from loot_unlock.unlock_rules import DEFAULT_RESOURCE_BALANCE, POWER_MAX, POWER_MIN


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


# ============================================================
# Experience
# ============================================================

def base_exp_by_power(power: float) -> int:
    """Returns -1 when power is outside 0..15."""
    if power < POWER_MIN or power > POWER_MAX:
        return -1
    return round_half_up(1.55 * math.pow(power, 1.7))


# ============================================================
# Gold
# ============================================================

def gold_coin_per_kill_by_power(power: float) -> int:
    L0 = 3           # early game base value
    r = 1.40         # geometric growth
    boost = 0.015    # linear booster for the midgame

    # logistic soft cap
    pS = 10          # where damping starts
    w = 2.4          # transition width
    d = 0.2          # late game brake strength

    soft = 1 / (1 + math.exp((power - pS) / w))
    damp = 1 - d * (1 - soft)
    multiplier = 14

    return round_half_up(L0 * math.pow(r, power) * (1 + boost * power) * damp * multiplier) - 39


def recommended_default_level(power: float, area_level: int = 200, t: float = 0.45) -> int:
    multiplier = 1.3
    x = power / 10
    curve = (1 - t) * x + t * x * x
    return round_half_up(area_level * curve * multiplier) - 3


def gold_per_level_by_power(power: float) -> float:
    """
    Gold a monster should hand out per player level.

    Gold per kill spread across the recommended level for that power.
    A zero recommended level gives a zero budget.
    """
    gold_per_kill = gold_coin_per_kill_by_power(power)
    level = recommended_default_level(power)
    if level == 0:
        return 0.0
    return round2(gold_per_kill / level)


def balance_multiplier(balance_tier: int) -> float:
    # Loot1..Loot4 each add 3.75%, capped at +15%
    if balance_tier <= 0:
        return 1

    max_variation = 0.15
    step = max_variation / 4
    level = min(balance_tier, 4)

    return 1 + (level * step)


def recommended_gold_coins_per_kill(budget_per_level: Optional[float], power: float = 10) -> float:
    """Share of the level budget paid as flat gold coins: 30% at power 0 down to 15%."""
    if not budget_per_level or budget_per_level <= 0:
        return 0
    gold_coins_percentage = max(0.15, 0.3 - (power * 0.01))
    return round2(budget_per_level * gold_coins_percentage)


def recommended_base_gold_coins_per_kill(power: float) -> int:
    return 3


def cpm(power: float) -> int:
    """Cost per minute, logistic S-curve between 100 and 3500."""
    base = 100
    top = 3500
    pS = 8
    w = 2.0

    logistic = 1 / (1 + math.exp(-(power - pS) / w))
    return round_half_up(base + (top - base) * logistic)


# ============================================================
# Resource balance
# ============================================================

def parse_resource_balance(resource_balance: Optional[str], kind: str = "Loot") -> int:
    """
    Extracts the tier of one resource kind from a balance tag.

    "Loot3" -> 3 for kind "Loot", 0 for kind "Exp". "Equals" -> 0.
    """
    if not resource_balance or kind not in resource_balance:
        return 0
    match = re.match(r"\s*([+-]?\d+)", resource_balance.replace(kind, "", 1))
    if not match:
        return 0
    return int(match.group(1))


def budget_per_level(power: Optional[float], resource_balance: Optional[str]) -> float:
    power = power or 0
    loot_balance = parse_resource_balance(resource_balance or DEFAULT_RESOURCE_BALANCE, "Loot")
    base_gold = gold_per_level_by_power(power)
    multiplier = balance_multiplier(loot_balance)
    return round2(base_gold * multiplier)


def recommended_experience(power: float, resource_balance: Optional[str] = DEFAULT_RESOURCE_BALANCE) -> int:
    base_exp = base_exp_by_power(power)
    if base_exp == -1:
        return -1
    exp_balance = parse_resource_balance(resource_balance, "Exp")
    return round_half_up(base_exp * balance_multiplier(exp_balance))


def curve_row(power: float) -> Dict[str, Any]:
    gold_per_level = gold_per_level_by_power(power)
    return {
        "power": power,
        "base_exp": base_exp_by_power(power),
        "gold_coin_per_kill": gold_coin_per_kill_by_power(power),
        "recommended_default_level": recommended_default_level(power),
        "gold_per_level": gold_per_level,
        "recommended_gold_coins_per_kill": recommended_gold_coins_per_kill(gold_per_level, power),
        "cpm": cpm(power),
    }
