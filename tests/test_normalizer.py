import pytest

from cart_preview.services.normalizer import extract_item, price_text, unwrap_batch_result
from cart_preview.services.profiles import V1, V2


def _cart(*items):
    return {"cart_create": {"body": {"items": list(items)}}}


def _checkout(*items):
    return {"resume_checkout": {"body": {"data": {"itemList": list(items)}}}}


@pytest.mark.parametrize("profile", [V1, V2])
@pytest.mark.parametrize("raw", [{}, None, [], {"cart_create": {"body": {"items": []}}},
                                 {**_cart(), **_checkout()}])
def test_no_item_yields_none(profile, raw):
    assert extract_item(raw, profile) is None


def test_title_precedence():
    item = extract_item(_cart({"productName": "Shoe", "name": "n", "title": "t"}), V2)
    assert item.title == "Shoe"


def test_title_skips_empty_alias():
    assert extract_item(_cart({"productName": "", "name": None, "title": "Cap"}), V2).title == "Cap"


def test_missing_fields_default():
    item = extract_item(_cart({"sku": "X"}), V2)
    assert (item.title, item.image, item.price) == ("", "", None)


@pytest.mark.parametrize("fields, expected", [
    ({"imageUrl": "a", "image_url": "b"}, "a"),
    ({"image_url": "b", "image": "c"}, "b"),
    ({"image": "c", "images": ["d"]}, "c"),
    ({"images": ["d", "e"]}, "d"),
    ({"images": []}, ""),
])
def test_image_aliases(fields, expected):
    assert extract_item(_cart(fields), V1).image == expected


def test_price_passed_through_untyped():
    assert extract_item(_cart({"price": "abc"}), V1).price == "abc"


def test_zero_price_is_kept():
    assert extract_item(_cart({"price": 0, "salePrice": 10}), V1).price == 0


def test_compare_at_price_only_in_v2():
    raw = _cart({"compareAtPrice": 42})
    assert extract_item(raw, V1).price is None
    assert extract_item(raw, V2).price == 42


def test_v1_falls_back_to_checkout_items():
    raw = {**_cart(), **_checkout({"name": "Bag", "salePrice": 30})}
    item = extract_item(raw, V1)
    assert item.title == "Bag"
    assert item.price == 30


def test_v2_does_not_fall_back():
    raw = {**_cart(), **_checkout({"name": "Bag"})}
    assert extract_item(raw, V2) is None


def test_rich_item_preferred_over_checkout():
    raw = {**_cart({"productName": "Rich"}), **_checkout({"name": "Plain"})}
    assert extract_item(raw, V1).title == "Rich"


def test_data_envelope_is_unwrapped():
    raw = {"data": _cart({"productName": "Shoe"})}
    assert unwrap_batch_result(raw) == _cart({"productName": "Shoe"})
    assert extract_item(raw, V2).title == "Shoe"


@pytest.mark.parametrize("price, text", [(19.0, "19"), (19.5, "19.5"), (7, "7"), ("12.00", "12.00")])
def test_price_text(price, text):
    assert price_text(price) == text


@pytest.mark.parametrize("envelope", [[], "oops", 0, {}])
def test_non_null_data_envelope_always_wins(envelope):
    raw = {"data": envelope, **_cart({"productName": "Shoe"})}
    assert extract_item(raw, V2) is None


def test_null_data_envelope_is_ignored():
    assert extract_item({"data": None, **_cart({"productName": "Shoe"})}, V2).title == "Shoe"
