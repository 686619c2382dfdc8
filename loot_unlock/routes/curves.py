from fastapi import APIRouter, HTTPException
from loot_unlock.reward_curves import budget_per_level, curve_row, recommended_gold_coins_per_kill
from loot_unlock.schemas import BudgetRequest
from loot_unlock.unlock_rules import POWER_MAX, POWER_MIN

router = APIRouter(prefix="/curves", tags=["Reward Curves"])

@router.get("/", summary="Curve table for every integer power")
def curves_table():
    return {"curves": [curve_row(power) for power in range(POWER_MIN, POWER_MAX + 1)]}

@router.get("/{power}", summary="Every curve value for one power")
def curves_for_power(power: float):
    if power < POWER_MIN or power > POWER_MAX:
        raise HTTPException(400, f"power must be between {POWER_MIN} and {POWER_MAX}")
    return curve_row(power)

@router.post("/budget", summary="Budget per level for a power + resource balance")
def budget_endpoint(req: BudgetRequest):
    budget = budget_per_level(req.power, req.resource_balance)
    return {
        "power": req.power,
        "resource_balance": req.resource_balance,
        "budget_per_level": budget,
        "recommended_gold_coins_per_kill": recommended_gold_coins_per_kill(budget, req.power),
    }
