from __future__ import annotations
import base64
import logging
import os
import re
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_log = logging.getLogger(__name__)

DEFAULT_BATCH_URL = "https://edge.pickrr.com/batch/api/v1"


def normalize_domain(domain: str) -> str:
    d = (domain or "").strip()
    d = re.sub(r"^https?://", "", d)
    return d[:-1] if d.endswith("/") else d


def merchant_id_for(domain: str) -> str:
    """Opaque merchant id sent upstream as the ``uId`` header."""
    return base64.b64encode(normalize_domain(domain).encode("utf-8")).decode("ascii")


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # ── Storefront ────────────────────────────────────────────────────────────
    shop_domain: str
    port: int = 3000
    profile: Literal["v1", "v2"] = "v2"

    # ── Upstream batch API ────────────────────────────────────────────────────
    batch_api_url: str = DEFAULT_BATCH_URL
    device_id: str = "fastrr"
    http_timeout_sec: float = Field(default=20.0, gt=0)
    max_image_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    # ── Derived once from shop_domain ─────────────────────────────────────────
    merchant_id: str = ""
    landing_page_url: str = ""

    @model_validator(mode="before")
    @classmethod
    def _derive_merchant_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            shop = normalize_domain(data.get("shop_domain") or "")
            data = {**data, "merchant_id": merchant_id_for(shop), "landing_page_url": f"https://{shop}"}
        return data

    @field_validator("shop_domain")
    @classmethod
    def _strip_scheme(cls, v: str) -> str:
        v = normalize_domain(v)
        if not v:
            raise ValueError("shop_domain must not be empty")
        return v


def load_settings() -> Settings:
    """Read settings from the environment (a local .env is loaded first).

    Raises RuntimeError when SHOP_DOMAIN is absent or a value does not parse.
    """
    load_dotenv(override=False)
    shop = normalize_domain(os.getenv("SHOP_DOMAIN", ""))
    if not shop:
        raise RuntimeError("SHOP_DOMAIN missing. Set it in .env or environment.")
    try:
        settings = Settings(
            shop_domain=shop,
            port=int(os.getenv("PORT", "3000")),
            profile=os.getenv("PREVIEW_PROFILE", "v2").strip().lower(),
            batch_api_url=os.getenv("BATCH_API_URL", DEFAULT_BATCH_URL).strip(),
            device_id=os.getenv("DEVICE_ID", "fastrr"),
            http_timeout_sec=float(os.getenv("HTTP_TIMEOUT_SEC", "20")),
            max_image_bytes=int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024))),
        )
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        raise RuntimeError(f"Invalid configuration: {e}") from e
    _log.info("Loaded settings for %s (profile=%s)", settings.shop_domain, settings.profile)
    return settings
