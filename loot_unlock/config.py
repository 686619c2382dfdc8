import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from loot_unlock.unlock_rules import MAX_UNLOCK_LEVEL, NO_UNLOCK_CAP


class Settings(BaseModel):
    catalog_path: Optional[str] = Field(
        default=None,
        description="JSON item catalog loaded as the default catalog for every request."
    )
    max_unlock_level: int = Field(
        default=MAX_UNLOCK_LEVEL,
        description="Cap on unlock levels. -1 = no cap."
    )
    log_level: str = Field(default="INFO")
    debug_trace: bool = Field(
        default=False,
        description="Include tracebacks in 500 responses (dev only)."
    )

    @field_validator("max_unlock_level")
    @classmethod
    def cap_or_sentinel(cls, v):
        if v != NO_UNLOCK_CAP and v < 0:
            raise ValueError("max_unlock_level must be -1 (no cap) or >= 0")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v):
        return v.strip().upper()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ

    return Settings(
        catalog_path=env.get("LOOT_UNLOCK_CATALOG_PATH") or None,
        max_unlock_level=int(env.get("LOOT_UNLOCK_MAX_LEVEL", MAX_UNLOCK_LEVEL)),
        log_level=env.get("LOOT_UNLOCK_LOG_LEVEL", "INFO"),
        debug_trace=env.get("LOOT_UNLOCK_DEBUG_TRACE", "").strip() == "1",
    )
