from fastapi import APIRouter, Request
from loot_unlock.models.loot_models import UnlockLevelsMapResult, UnlockLevelsResult
from loot_unlock.schemas import UnlockLevelsMapRequest, UnlockLevelsRequest, ValidateLootRequest
from loot_unlock.services.unlock_service import (
    monster_unlock_levels,
    resolve_cap,
    resolve_catalog,
    unlock_levels_map,
    validate_monster,
)

router = APIRouter(prefix="/monsters", tags=["Unlock Levels"])

@router.post("/unlock-levels", response_model=UnlockLevelsResult, summary="Annotate a monster's loot with unlock levels")
def unlock_levels_endpoint(req: UnlockLevelsRequest, request: Request):
    catalog = resolve_catalog(req.catalog, request.app.state.catalog)
    cap = resolve_cap(req.max_unlock_level, request.app.state.settings.max_unlock_level)
    return monster_unlock_levels(req.monster, catalog, cap)

@router.post("/unlock-levels/map", response_model=UnlockLevelsMapResult, summary="Item name -> unlock level")
def unlock_levels_map_endpoint(req: UnlockLevelsMapRequest, request: Request):
    catalog = resolve_catalog(req.catalog, request.app.state.catalog)
    cap = resolve_cap(req.max_unlock_level, request.app.state.settings.max_unlock_level)
    return unlock_levels_map(req.loot, req.power, req.resource_balance, catalog, cap)

@router.post("/validate", summary="Check a monster's loot against the catalog and fresh unlock levels")
def validate_endpoint(req: ValidateLootRequest, request: Request):
    catalog = resolve_catalog(req.catalog, request.app.state.catalog)
    cap = resolve_cap(req.max_unlock_level, request.app.state.settings.max_unlock_level)
    return validate_monster(req.monster, catalog, cap)
