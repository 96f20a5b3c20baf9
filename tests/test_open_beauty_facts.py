"""
Tests for yumcheck/open_beauty_facts.py.

Covers:
  - mapping of the API payload onto ProductInfo
  - not-found, network, HTTP and decoding failures
"""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from yumcheck.errors import LookupErrorKind, ProductLookupError
from yumcheck.open_beauty_facts import OpenBeautyFactsClient


@pytest.fixture
def client():
    return OpenBeautyFactsClient()


def _response(status_code=200, payload=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


_PRODUCT = {
    "product_name": "Micellar Water",
    "brands": "Garnier",
    "ingredients_text": "Aqua, Hexylene Glycol, Glycerin, Disodium Cocoamphodiacetate",
    "categories": "Cleansers",
    "quantity": "400 ml",
    "image_url": "https://images.openbeautyfacts.org/front.jpg",
    "image_front_url": "",
    "labels_tags": ["en:vegan", "en:fragrance-free"],
    "ecoscore_grade": "b",
    "allergens_hierarchy": ["en:milk", "en:nuts"],
}


class TestFetchProduct:
    def test_happy_path(self, client):
        payload = {"status": 1, "code": "3600541358508", "product": _PRODUCT}
        with patch("yumcheck.open_beauty_facts.requests.get", return_value=_response(payload=payload)) as get:
            product = client.fetch_product("3600541358508")

        assert get.call_args.args[0] == "https://world.openbeautyfacts.org/api/v0/product/3600541358508.json"
        assert product.barcode == "3600541358508"
        assert product.product_name == "Micellar Water"
        assert product.brands == "Garnier"
        assert product.category == "Cleansers"
        assert product.labels == ["en:vegan", "en:fragrance-free"]
        assert product.eco_score == "b"
        assert product.allergens == ["milk", "nuts"]
        assert product.image_front_url is None

    def test_missing_optional_fields(self, client):
        payload = {"status": 1, "product": {"product_name": "Bare"}}
        with patch("yumcheck.open_beauty_facts.requests.get", return_value=_response(payload=payload)):
            product = client.fetch_product("1")
        assert product.labels == []
        assert product.allergens == []
        assert product.ingredients_text is None

    def test_status_zero_is_not_found(self, client):
        payload = {"status": 0, "status_verbose": "product not found"}
        with patch("yumcheck.open_beauty_facts.requests.get", return_value=_response(payload=payload)):
            with pytest.raises(ProductLookupError) as exc:
                client.fetch_product("1")
        assert exc.value.kind == LookupErrorKind.NOT_FOUND

    def test_network_error(self, client):
        with patch("yumcheck.open_beauty_facts.requests.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(ProductLookupError) as exc:
                client.fetch_product("1")
        assert exc.value.kind == LookupErrorKind.NETWORK

    def test_http_error(self, client):
        with patch("yumcheck.open_beauty_facts.requests.get", return_value=_response(status_code=503)):
            with pytest.raises(ProductLookupError) as exc:
                client.fetch_product("1")
        assert exc.value.kind == LookupErrorKind.UNKNOWN
        assert "Unexpected server response" in str(exc.value)

    def test_invalid_json(self, client):
        with patch("yumcheck.open_beauty_facts.requests.get", return_value=_response(json_error=True)):
            with pytest.raises(ProductLookupError) as exc:
                client.fetch_product("1")
        assert exc.value.kind == LookupErrorKind.DECODING

    def test_wrongly_typed_field_is_decoding_error(self, client):
        payload = {"status": 1, "product": {"product_name": ["not", "a", "string"]}}
        with patch("yumcheck.open_beauty_facts.requests.get", return_value=_response(payload=payload)):
            with pytest.raises(ProductLookupError) as exc:
                client.fetch_product("1")
        assert exc.value.kind == LookupErrorKind.DECODING
