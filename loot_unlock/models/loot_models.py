from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Optional

class LootItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, description="Item name, matched case-insensitively against the catalog")
    chance: float = Field(0, ge=0, le=100, description="Drop chance in percent (0-100)")
    count_max: Optional[int] = Field(1, ge=0, description="Maximum stack size")
    origin: Optional[str] = Field(None, description="Loot tag (craft primary, race, None, ...)")
    unlock_level: Optional[int] = Field(None, ge=0, description="Stored unlock level, if any")

class CatalogAttributes(BaseModel):
    model_config = ConfigDict(extra="allow")

    monster_drop_stage: str = ""
    loot_category: str = ""

class CatalogItem(BaseModel):
    name: str = Field(..., min_length=1)
    valuation: Optional[float] = None
    sell_price: Optional[float] = None
    tier: str = ""
    attributes: CatalogAttributes = Field(default_factory=CatalogAttributes)

class Monster(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    power: float = Field(0, ge=0, le=15, description="Monster power (0-15)")
    resource_balance: str = Field("Equals", description="Equals | Loot1..Loot4 | Exp1..Exp4")
    default_level: Optional[int] = None
    no_loot: bool = False
    loot: List[LootItem] = Field(default_factory=list)

class UnlockLevelsResult(BaseModel):
    budget_per_level: float
    max_unlock_level: int
    loot: List[Dict]
    display_order: List[str] = Field(default_factory=list, description="Loot names, earliest unlock first")

class UnlockLevelsMapResult(BaseModel):
    budget_per_level: float
    max_unlock_level: int
    unlock_levels: Dict[str, int]
