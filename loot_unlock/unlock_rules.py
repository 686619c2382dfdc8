DROP_STAGE_KEYS = ["Beginner", "Low-level", "Intermediate", "Mid-level", "High-level", "Endgame"]
TIER_KEYS = ["basic", "common", "uncommon", "rare", "epic", "legendary", "mythic"]

# Lower rank unlocks first
DROP_STAGE_ORDER = {stage.lower(): rank for rank, stage in enumerate(DROP_STAGE_KEYS, start=1)}
TIER_ORDER = {tier: rank for rank, tier in enumerate(TIER_KEYS, start=1)}
MISSING_RANK = 999

# Higher priority unlocks first within the same drop stage
LOOT_CATEGORY_PRIORITIES = {
    "craft primary": 7,
    "craft secondary": 6,
    "legendary": 5,
    "quest": 4,
    "special": 3,
    "race": 2,
    "general": 1,
}
UNKNOWN_CATEGORY_PRIORITY = 0

# Never gated, never part of the budget walk
GOLD_COIN_NAMES = {"gold coin", "gold coins"}

# -1 = no cap on unlock levels
NO_UNLOCK_CAP = -1
MAX_UNLOCK_LEVEL = NO_UNLOCK_CAP

# Per-item bound on the level increment loop
MAX_ITERATIONS = 10_000

POWER_MIN = 0
POWER_MAX = 15

DEFAULT_RESOURCE_BALANCE = "Equals"

# Last unlock level should reach default_level * 1.4; deviation past -40% is an error
LAST_UNLOCK_LEVEL_FACTOR = 1.4
LAST_UNLOCK_MAX_DEVIATION = -40
