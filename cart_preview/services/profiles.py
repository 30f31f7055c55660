from __future__ import annotations
from typing import Tuple

from pydantic import BaseModel, ConfigDict


class PreviewProfile(BaseModel):
    """Knobs that differ between the two deployed behaviours of the preview API."""
    model_config = ConfigDict(frozen=True)

    name: str
    landing_page_in_cart: bool
    fallback_to_checkout: bool
    price_aliases: Tuple[str, ...]
    proxy_images: bool
    debug_passthrough_status: bool


V1 = PreviewProfile(
    name="v1",
    landing_page_in_cart=False,
    fallback_to_checkout=True,
    price_aliases=("price", "productPrice", "salePrice"),
    proxy_images=False,
    debug_passthrough_status=True,
)

V2 = PreviewProfile(
    name="v2",
    landing_page_in_cart=True,
    fallback_to_checkout=False,
    price_aliases=("price", "productPrice", "salePrice", "compareAtPrice"),
    proxy_images=True,
    debug_passthrough_status=False,
)

PROFILES = {p.name: p for p in (V1, V2)}


def get_profile(name: str) -> PreviewProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown preview profile: {name!r} (expected one of {sorted(PROFILES)})") from None
