from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from loot_unlock.models.loot_models import CatalogItem, LootItem, Monster


def _cap_or_sentinel(v):
    if v is not None and v != -1 and v < 0:
        raise ValueError("max_unlock_level must be -1 (no cap) or >= 0")
    return v


# -----------------------------
# BASE CATALOG REQUEST
# -----------------------------

class CatalogRequest(BaseModel):
    catalog: Optional[List[CatalogItem]] = Field(
        default=None,
        description="Item catalog for this request. "
                    "Falls back to the service's configured catalog when omitted."
    )


# -----------------------------
# BUDGET
# -----------------------------

class BudgetRequest(BaseModel):
    power: float = Field(
        ge=0,
        le=15,
        description="Monster power (0-15)"
    )
    resource_balance: str = Field(
        default="Equals",
        description="Equals | Loot1..Loot4 | Exp1..Exp4"
    )


# -----------------------------
# SORT LOOT
# -----------------------------

class SortLootRequest(CatalogRequest):
    loot: List[LootItem] = Field(
        description="Loot entries to order by unlock priority."
    )


# -----------------------------
# UNLOCK LEVELS (LIST FORM)
# -----------------------------

class UnlockLevelsRequest(CatalogRequest):
    monster: Monster
    max_unlock_level: Optional[int] = Field(
        default=None,
        description="Overrides the configured cap. -1 = no cap."
    )

    @field_validator("max_unlock_level")
    @classmethod
    def cap_or_sentinel(cls, v):
        return _cap_or_sentinel(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "monster": {
                    "name": "Cave Rat",
                    "power": 3,
                    "resource_balance": "Loot2",
                    "loot": [
                        {"name": "Gold Coin", "chance": 100, "count_max": 8},
                        {"name": "Cheese", "chance": 40, "count_max": 1},
                        {"name": "Rat Tail", "chance": 12.5, "count_max": 3}
                    ]
                },
                "catalog": [
                    {"name": "Cheese", "valuation": 6, "tier": "basic",
                     "attributes": {"monster_drop_stage": "Beginner", "loot_category": "general"}},
                    {"name": "Rat Tail", "valuation": 40, "tier": "common",
                     "attributes": {"monster_drop_stage": "Beginner", "loot_category": "craft primary"}}
                ],
                "max_unlock_level": -1
            }
        }
    }


# -----------------------------
# UNLOCK LEVELS (MAP FORM)
# -----------------------------

class UnlockLevelsMapRequest(CatalogRequest):
    loot: List[LootItem]
    power: float = Field(
        default=0,
        ge=0,
        le=15,
        description="Monster power (0-15)"
    )
    resource_balance: str = Field(default="Equals")
    max_unlock_level: Optional[int] = Field(
        default=None,
        description="Overrides the configured cap. -1 = no cap."
    )

    @field_validator("max_unlock_level")
    @classmethod
    def cap_or_sentinel(cls, v):
        return _cap_or_sentinel(v)


# -----------------------------
# VALIDATE
# -----------------------------

class ValidateLootRequest(UnlockLevelsRequest):
    pass
