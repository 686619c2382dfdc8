from fastapi import APIRouter, Request
from loot_unlock.schemas import SortLootRequest
from loot_unlock.services.unlock_service import resolve_catalog, sorted_loot

router = APIRouter(prefix="/loot", tags=["Loot"])

@router.post("/sort", summary="Order loot by unlock priority")
def sort_loot_endpoint(req: SortLootRequest, request: Request):
    catalog = resolve_catalog(req.catalog, request.app.state.catalog)
    items = sorted_loot(req.loot, catalog)
    return {"count": len(items), "loot": items}
