import logging
from typing import Dict, Optional

import requests
from pydantic import ValidationError

from .errors import LookupErrorKind, ProductLookupError
from .models import ProductInfo

logger = logging.getLogger(__name__)


class OpenBeautyFactsClient:
    BASE_URL = "https://world.openbeautyfacts.org/api/v0"

    def __init__(self, base_url: Optional[str] = None, timeout: float = 15):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.headers = {
            'User-Agent': 'YumCheck/1.0 (product-safety-scanner)'
        }

    def fetch_product(self, barcode: str) -> ProductInfo:
        """Look a barcode up in the public Open Beauty Facts database."""
        url = f"{self.base_url}/product/{barcode}.json"
        logger.info("Fetching %s from Open Beauty Facts: %s", barcode, url)

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Open Beauty Facts network error: %s", e)
            raise ProductLookupError(LookupErrorKind.NETWORK, str(e)) from e

        if not 200 <= response.status_code < 300:
            raise ProductLookupError(LookupErrorKind.UNKNOWN, "Unexpected server response")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProductLookupError(LookupErrorKind.DECODING, str(e)) from e

        if not isinstance(payload, dict):
            raise ProductLookupError(LookupErrorKind.DECODING, "Response is not a JSON object")

        product = payload.get("product")
        if payload.get("status") != 1 or not product:
            raise ProductLookupError.not_found()

        try:
            return self._to_product_info(barcode, product)
        except ValidationError as e:
            raise ProductLookupError(LookupErrorKind.DECODING, str(e)) from e

    def _to_product_info(self, barcode: str, product: Dict) -> ProductInfo:
        allergens = [allergen.replace("en:", "") for allergen in product.get("allergens_hierarchy") or []]

        return ProductInfo(
            barcode=barcode,
            product_name=product.get("product_name"),
            brands=product.get("brands"),
            ingredients_text=product.get("ingredients_text"),
            image_url=product.get("image_url") or None,
            category=product.get("categories"),
            quantity=product.get("quantity"),
            image_front_url=product.get("image_front_url") or None,
            image_ingredients_url=product.get("image_ingredients_url") or None,
            image_packaging_url=product.get("image_packaging_url") or None,
            labels=product.get("labels_tags") or [],
            eco_score=product.get("ecoscore_grade"),
            allergens=allergens,
        )
