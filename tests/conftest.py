from __future__ import annotations
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
import requests
from fastapi.testclient import TestClient

from cart_preview.app import create_app
from cart_preview.services.batch_client import BatchClient
from cart_preview.settings import Settings


def make_response(status: int = 200, json_body: Any = None, content: bytes = b"",
                  headers: Optional[Dict[str, str]] = None) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    if json_body is not None:
        import json
        r._content = json.dumps(json_body).encode("utf-8")
        r.headers["Content-Type"] = "application/json"
    else:
        r._content = content
    r._content_consumed = True
    r.headers.update(headers or {})
    return r


@pytest.fixture()
def settings_v1() -> Settings:
    return Settings(shop_domain="https://demo-shop.myshopify.com/", profile="v1")


@pytest.fixture()
def settings_v2() -> Settings:
    return Settings(shop_domain="demo-shop.myshopify.com", profile="v2")


@pytest.fixture()
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


def build_test_client(settings: Settings, session: MagicMock) -> TestClient:
    return TestClient(create_app(settings, BatchClient(settings, session_factory=lambda: session)))


@pytest.fixture()
def client_v1(settings_v1, session) -> TestClient:
    return build_test_client(settings_v1, session)


@pytest.fixture()
def client_v2(settings_v2, session) -> TestClient:
    return build_test_client(settings_v2, session)
