from __future__ import annotations
import logging
from typing import Callable, Optional, Tuple

import requests

from ..schemas import BatchRequestChain, CartItem
from ..settings import Settings
from .batch_payload import build_batch_payload
from .normalizer import extract_item
from .profiles import PreviewProfile

_log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class UpstreamError(RuntimeError):
    """An outbound call failed (network error, non-2xx status or oversized body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BatchClient:
    """Outbound calls for one inbound request each.

    Every call opens its own session and closes it when done, so cookies set
    by the batch API or the CDN never reach another caller's chain.
    """

    def __init__(self, settings: Settings,
                 session_factory: Callable[[], requests.Session] = requests.Session):
        self.settings = settings
        self.session_factory = session_factory
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Device-Id": settings.device_id,
        }

    def execute(self, payload: BatchRequestChain) -> requests.Response:
        """POST one chain to the batch API. Network errors propagate."""
        session = self.session_factory()
        try:
            return session.post(
                self.settings.batch_api_url,
                headers=self.headers,
                json=payload.to_payload(),
                timeout=self.settings.http_timeout_sec,
            )
        finally:
            session.close()

    def run(self, token: str, profile: PreviewProfile) -> requests.Response:
        return self.execute(build_batch_payload(token, self.settings, profile))

    def fetch_first_item(self, token: str, profile: PreviewProfile) -> Optional[CartItem]:
        try:
            resp = self.run(token, profile)
        except requests.RequestException as e:
            _log.warning("Batch API unreachable: %s", e)
            return None
        if not resp.ok:
            _log.warning("Batch API returned HTTP %s", resp.status_code)
            return None
        try:
            raw = resp.json()
        except ValueError as e:
            _log.warning("Batch API returned a non-JSON body: %s", e)
            return None
        return extract_item(raw, profile)

    def fetch_image(self, url: str) -> Tuple[bytes, str]:
        """Download an image, returning (bytes, content type).

        The body is streamed and capped at ``max_image_bytes``.
        """
        limit = self.settings.max_image_bytes
        session = self.session_factory()
        try:
            r = session.get(url, timeout=self.settings.http_timeout_sec, stream=True)
            try:
                if not r.ok:
                    raise UpstreamError(f"Image fetch for {url} returned HTTP {r.status_code}", r.status_code)
                buf = bytearray()
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    buf.extend(chunk)
                    if len(buf) > limit:
                        raise UpstreamError(f"Image at {url} exceeds {limit} bytes")
                content_type = r.headers.get("Content-Type") or "application/octet-stream"
            finally:
                r.close()
        except requests.RequestException as e:
            raise UpstreamError(f"Image fetch failed for {url}: {e}") from e
        finally:
            session.close()
        return bytes(buf), content_type
