import logging
import os
from datetime import datetime, timezone
from typing import Dict, Optional

import requests
from pydantic import ValidationError

from .analyzer import parse_ingredients
from .errors import AddProductError, AddProductErrorKind, LookupErrorKind, ProductLookupError
from .models import ProductInfo, SupabaseAttributes, SupabaseProduct

logger = logging.getLogger(__name__)


class CloudProductDatabase:
    """Barcode-keyed product table behind the Supabase REST API."""

    LOOKUP_TIMEOUT = 5.0
    INSERT_TIMEOUT = 30.0

    def __init__(self, url: Optional[str] = None, api_key: Optional[str] = None):
        self.url = (url or os.getenv("SUPABASE_URL") or "").rstrip("/")
        self.api_key = api_key or os.getenv("SUPABASE_KEY")

    @property
    def configured(self) -> bool:
        return bool(self.url and self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key or "",
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def get_product(self, barcode: str) -> ProductInfo:
        if not self.configured:
            raise ProductLookupError(LookupErrorKind.NETWORK, "Cloud database not configured")

        url = f"{self.url}/rest/v1/products"
        params = {"barcode": f"eq.{barcode}", "select": "*"}
        try:
            response = requests.get(url, params=params, headers=self._headers(), timeout=self.LOOKUP_TIMEOUT)
        except requests.Timeout as e:
            raise ProductLookupError(
                LookupErrorKind.NETWORK,
                "Request timed out. Please check your internet connection and try again.",
            ) from e
        except requests.RequestException as e:
            raise ProductLookupError(LookupErrorKind.NETWORK, str(e)) from e

        if response.status_code != 200:
            logger.warning("Cloud database HTTP error: %s", response.status_code)
            raise ProductLookupError(LookupErrorKind.NETWORK, f"HTTP Error {response.status_code}")

        try:
            rows = response.json()
        except ValueError as e:
            raise ProductLookupError(LookupErrorKind.DECODING, str(e)) from e

        if not isinstance(rows, list):
            raise ProductLookupError(LookupErrorKind.DECODING, "Expected a JSON array of products")
        if not rows:
            raise ProductLookupError.not_found()

        try:
            return self._from_supabase(SupabaseProduct.model_validate(rows[0]))
        except ValidationError as e:
            logger.warning("Structured decoding failed, trying manual parsing: %s", e)

        if not isinstance(rows[0], dict):
            raise ProductLookupError(LookupErrorKind.DECODING, "Product row is not a JSON object")
        return self._from_manual_json(rows[0], barcode)

    def add_product(self, product: ProductInfo) -> None:
        if not self.configured:
            raise AddProductError(AddProductErrorKind.NETWORK, "Cloud database not configured")

        try:
            body = self._to_supabase(product).model_dump(mode="json")
        except (ValidationError, ValueError) as e:
            raise AddProductError(AddProductErrorKind.ENCODING, str(e)) from e

        headers = self._headers()
        headers["Prefer"] = "return=minimal"
        try:
            response = requests.post(
                f"{self.url}/rest/v1/products", json=body, headers=headers, timeout=self.INSERT_TIMEOUT
            )
        except requests.RequestException as e:
            raise AddProductError(AddProductErrorKind.NETWORK, str(e)) from e

        if not 200 <= response.status_code <= 299:
            raise AddProductError(AddProductErrorKind.SERVER, f"Server error: {response.status_code}")

        logger.info("Added %s to the cloud database", product.barcode)

    # Conversion

    def _from_supabase(self, row: SupabaseProduct) -> ProductInfo:
        attributes = row.attributes
        return ProductInfo(
            barcode=row.barcode,
            product_name=row.name,
            brands=row.brand,
            ingredients_text=", ".join(attributes.ingredients) if attributes.ingredients is not None else None,
            image_url=attributes.image_url or None,
            category=row.category,
            quantity=row.quantity,
            labels=attributes.claims or [],
            eco_score=attributes.ecoscore_grade,
            allergens=attributes.allergens or [],
        )

    def _from_manual_json(self, row: Dict, barcode: str) -> ProductInfo:
        def text(value) -> Optional[str]:
            return value if isinstance(value, str) else None

        def strings(value) -> list:
            if not isinstance(value, list):
                return []
            return [item for item in value if isinstance(item, str)]

        attributes = row.get("attributes")
        if not isinstance(attributes, dict):
            attributes = {}

        ingredients = strings(attributes.get("ingredients"))
        return ProductInfo(
            barcode=text(row.get("barcode")) or barcode,
            product_name=text(row.get("name")) or "",
            brands=text(row.get("brand")),
            ingredients_text=", ".join(ingredients) if ingredients else None,
            image_url=text(attributes.get("image_url")),
            category=text(row.get("category")),
            quantity=text(row.get("quantity")),
            labels=strings(attributes.get("claims")),
            eco_score=text(attributes.get("ecoscore_grade")),
            allergens=strings(attributes.get("allergens")),
        )

    def _to_supabase(self, product: ProductInfo) -> SupabaseProduct:
        ingredients = parse_ingredients(product.ingredients_text)
        now = datetime.now(timezone.utc).isoformat()

        return SupabaseProduct(
            barcode=product.barcode,
            name=product.product_name or "Unknown Product",
            brand=product.brands,
            category=product.category,
            quantity=product.quantity,
            attributes=SupabaseAttributes(
                ingredients=ingredients or None,
                claims=product.labels or None,
                image_url=product.image_url,
                allergens=product.allergens or None,
                ecoscore_grade=product.eco_score,
            ),
            created_at=now,
            updated_at=now,
        )
