from __future__ import annotations
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from typing import Optional
import logging

import requests

from .services.batch_client import BatchClient, UpstreamError
from .services.normalizer import price_text
from .services.profiles import get_profile
from .settings import Settings, load_settings

_log = logging.getLogger(__name__)

def _missing_token() -> PlainTextResponse:
    return PlainTextResponse("Missing token", status_code=400)

def create_app(settings: Settings, client: Optional[BatchClient] = None) -> FastAPI:
    profile = get_profile(settings.profile)
    client = client or BatchClient(settings)

    app = FastAPI(title="Cart Preview API")
    # storefront pages on any origin embed these endpoints
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=False,
        allow_methods=["GET"], allow_headers=["*"]
    )

    @app.get("/cart-title")
    def cart_title(token: Optional[str] = None):
        if not token:
            return _missing_token()
        item = client.fetch_first_item(token, profile)
        if item is None:
            return PlainTextResponse("Cart not found or empty", status_code=404)
        return PlainTextResponse(item.title)

    @app.get("/cart-price")
    def cart_price(token: Optional[str] = None):
        if not token:
            return _missing_token()
        item = client.fetch_first_item(token, profile)
        if item is None or item.price is None:
            return PlainTextResponse("Price not found", status_code=404)
        return PlainTextResponse(price_text(item.price))

    @app.get("/cart-image")
    def cart_image(token: Optional[str] = None):
        if not token:
            return _missing_token()
        item = client.fetch_first_item(token, profile)
        if item is None or not item.image:
            return PlainTextResponse("Image not found", status_code=404)
        if not profile.proxy_images:
            return RedirectResponse(item.image, status_code=302)
        try:
            content, content_type = client.fetch_image(item.image)
        except UpstreamError as e:
            _log.warning("%s", e)
            return PlainTextResponse("Image fetch failed", status_code=502)
        # Content-Length comes from the decoded bytes; requests already undid any gzip
        return Response(content=content, media_type=content_type)

    @app.get("/debug")
    def debug(token: Optional[str] = None):
        if not token:
            return _missing_token()
        try:
            r = client.run(token, profile)
        except requests.RequestException as e:
            _log.warning("Batch API unreachable: %s", e)
            return JSONResponse({"error": "Batch API unreachable", "detail": str(e)}, status_code=502)
        try:
            body = r.json()
        except ValueError:
            return JSONResponse({"error": "Batch API returned a non-JSON body", "status": r.status_code}, status_code=502)
        status = r.status_code if profile.debug_passthrough_status else 200
        return JSONResponse(body, status_code=status)

    return app

def main() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    app = create_app(settings)
    _log.info("Cart preview API running on %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

if __name__ == "__main__":
    main()
