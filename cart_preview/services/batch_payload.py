"""Builds the chained request document executed by the upstream batch API.

Each level holds one sub-request; later levels refer to earlier responses
through ``{{<key>$.<path>}}`` placeholders that the batch API substitutes
before sending. Nothing here resolves them.
"""
from __future__ import annotations

from ..schemas import BatchRequest, BatchRequestChain, RequestInput
from ..settings import Settings
from .profiles import PreviewProfile

SESSION_PATH = "/identity-service/session/create"
SELLER_CONFIG_PATH = "/aggregator/api/ve1/aggregator-service/seller/config"
CHECKOUT_PATH = "/aggregator/api/ve1/aggregator-service/abandon-checkout/?id={token}&type=report"
CART_PATH = "/cart/api/ve1/cart-service//{{session_create$.body.result.user_profile_id}}"

SESSION_ID = "{{session_create$.headers.pim-sid}}"
SELLER_ID = "{{seller_config$.body.data.id}}"
CHECKOUT_ITEMS = "{{resume_checkout$.body.data.itemList}}"


def _step(key: str, method: str, path: str, headers=None, body=None) -> BatchRequestChain:
    return BatchRequestChain(requests=[
        BatchRequest(key=key, input=RequestInput(method=method, path=path, headers=headers, body=body))
    ])


def cart_body(token: str, landing_page_url: str | None = None) -> str:
    # Hand-built: the items placeholder is not valid JSON until the batch API
    # substitutes it, and token/url go in unescaped.
    body = (
        '{"items":' + CHECKOUT_ITEMS + ','
        '"forceCreate":true,"channel":"SHOPIFY",'
        '"fields":{"referenceId":"' + token + '"}'
    )
    if landing_page_url is not None:
        body += ',"cartAttributes":{"landing_page_url":"' + landing_page_url + '"}'
    return body + "}"


def build_batch_payload(token: str, settings: Settings, profile: PreviewProfile) -> BatchRequestChain:
    uid = settings.merchant_id
    scoped = {"uId": uid, "Pim-Sid": SESSION_ID}
    landing = settings.landing_page_url if profile.landing_page_in_cart else None

    steps = [
        _step("session_create", "GET", SESSION_PATH),
        _step("seller_config", "GET", SELLER_CONFIG_PATH, headers=dict(scoped)),
        _step("resume_checkout", "GET", CHECKOUT_PATH.format(token=token), headers=dict(scoped)),
        _step("cart_create", "POST", CART_PATH,
              headers={"Pim-Sid": SESSION_ID, "Sid": SELLER_ID},
              body=cart_body(token, landing)),
    ]
    # link innermost-first so each level's `next` is the following step
    chain = steps[-1]
    for level in reversed(steps[:-1]):
        level.next = chain
        chain = level
    return chain
