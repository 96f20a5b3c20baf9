"""
Shared pytest fixtures.

Every test that touches the local store gets a fresh data directory under
tmp_path, so nothing is written to the real ./data directory.
"""
from __future__ import annotations

import pytest

from yumcheck.local_database import LocalDatabase
from yumcheck.models import ProductInfo


@pytest.fixture
def local_db(tmp_path):
    return LocalDatabase(data_dir=str(tmp_path / "data"))


@pytest.fixture
def make_product():
    def _make(barcode: str = "3600523614486", **overrides) -> ProductInfo:
        fields = {
            "barcode": barcode,
            "product_name": "Hydrating Cleanser",
            "brands": "CeraVe",
            "ingredients_text": "Aqua, Glycerin, Ceramide NP, Niacinamide",
            "category": "Cleansers",
            "quantity": "236 ml",
            "labels": ["en:fragrance-free"],
            "allergens": [],
        }
        fields.update(overrides)
        return ProductInfo(**fields)

    return _make
