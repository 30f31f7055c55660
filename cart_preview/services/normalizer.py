from __future__ import annotations
from typing import Any, Dict, Optional

from ..schemas import CartItem
from .profiles import PreviewProfile

TITLE_KEYS = ["productName", "name", "title"]
IMAGE_KEYS = ["imageUrl", "image_url", "image"]

def _dig(d: Any, *path: str) -> Any:
    for k in path:
        if not isinstance(d, dict):
            return None
        d = d.get(k)
    return d

def _first(seq: Any) -> Optional[Dict[str, Any]]:
    if isinstance(seq, list) and seq and isinstance(seq[0], dict):
        return seq[0]
    return None

def _pick_first(d: Dict[str, Any], keys: list[str], default=None):
    for k in keys:
        if d.get(k):
            return d[k]
    return default

def _pick_first_set(d: Dict[str, Any], keys, default=None):
    # 0 and "" are real prices; only a missing/null alias is skipped
    for k in keys:
        if d.get(k) is not None:
            return d[k]
    return default

def unwrap_batch_result(raw: Any) -> Dict[str, Any]:
    # any non-null `data` envelope replaces the raw body, even a non-object one
    if isinstance(raw, dict) and raw.get("data") is not None:
        raw = raw["data"]
    return raw if isinstance(raw, dict) else {}

def first_cart_item(result: Dict[str, Any], profile: PreviewProfile) -> Optional[Dict[str, Any]]:
    item = _first(_dig(result, "cart_create", "body", "items"))
    if item is None and profile.fallback_to_checkout:
        item = _first(_dig(result, "resume_checkout", "body", "data", "itemList"))
    return item

def normalize_image(item: Dict[str, Any]) -> str:
    img = _pick_first(item, IMAGE_KEYS)
    if not img:
        images = item.get("images")
        if isinstance(images, list) and images:
            img = images[0]
    return str(img) if img else ""

def extract_item(result: Any, profile: PreviewProfile) -> Optional[CartItem]:
    item = first_cart_item(unwrap_batch_result(result), profile)
    if item is None:
        return None
    return CartItem(
        title=str(_pick_first(item, TITLE_KEYS, default="")),
        image=normalize_image(item),
        price=_pick_first_set(item, profile.price_aliases),
    )

def price_text(price: Any) -> str:
    if isinstance(price, float) and price.is_integer():
        return str(int(price))
    if isinstance(price, bool):
        return "true" if price else "false"
    return str(price)
