import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Union

LOG = logging.getLogger(__name__)

# Item exports from the editor use camelCase keys
_ITEM_ALIASES = {
    "sellPrice": "sell_price",
    "sellingPrice": "sell_price",
}
_ATTRIBUTE_ALIASES = {
    "monsterDropStage": "monster_drop_stage",
    "lootCategory": "loot_category",
}


def _normalize_item(record: Any) -> Dict[str, Any]:
    if hasattr(record, "model_dump"):
        record = record.model_dump()

    item = {_ITEM_ALIASES.get(k, k): v for k, v in dict(record).items()}
    attributes = item.get("attributes") or {}
    item["attributes"] = {_ATTRIBUTE_ALIASES.get(k, k): v for k, v in dict(attributes).items()}
    item.setdefault("valuation", None)
    item.setdefault("sell_price", None)
    item.setdefault("tier", "")
    return item


def catalog_key(name: Any) -> str:
    """Key an item name is stored and looked up under."""
    return str(name or "").strip().lower()


def build_catalog(items: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
    """Case-insensitive item catalog: lower-cased name -> item record."""
    catalog = {}
    for record in items:
        item = _normalize_item(record)
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        catalog[catalog_key(name)] = item
    return catalog


def load_catalog(path: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    path = Path(path)

    with open(path, "r", encoding="utf-8-sig") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Catalog file {path} is not valid JSON: {exc}") from exc

    if isinstance(raw, dict):
        records = [{"name": name, **record} for name, record in raw.items()]
    elif isinstance(raw, list):
        records = raw
    else:
        raise ValueError(f"Catalog file {path} must hold a list or an object of items")

    catalog = build_catalog(records)
    LOG.info("loaded %d catalog items from %s", len(catalog), path)
    return catalog
