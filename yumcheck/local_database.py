import json
import logging
import os
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .models import HistoryItem, ProductInfo

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "local_products"
HISTORY_KEY = "scan_history"
FAVORITES_KEY = "favorites"

MAX_HISTORY_ITEMS = 100

Model = TypeVar("Model", bound=BaseModel)


class LocalDatabase:
    """Flat on-disk key-value store.

    Each key holds one JSON array that is always read and written whole.
    A missing or unreadable collection reads as empty. Every read-modify-write
    runs under one per-instance lock, since FastAPI calls sync endpoints from
    a thread pool.
    """

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = Path(data_dir or os.getenv("YUMCHECK_DATA_DIR", "data"))
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _read(self, key: str, model: Type[Model]) -> List[Model]:
        path = self._path(key)
        if not path.exists():
            return []
        try:
            with path.open(encoding="utf-8") as f:
                return [model.model_validate(item) for item in json.load(f)]
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.warning("Discarding unreadable collection %s: %s", key, e)
            return []

    def _write(self, key: str, items: List[BaseModel]):
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.data_dir, prefix=f"{key}.", suffix=".tmp", delete=False
        ) as f:
            try:
                json.dump([item.model_dump(mode="json") for item in items], f, indent=2)
            except BaseException:
                f.close()
                os.unlink(f.name)
                raise
        os.replace(f.name, self._path(key))

    def _remove(self, key: str):
        with self._lock:
            self._path(key).unlink(missing_ok=True)

    # Products

    def save_product(self, product: ProductInfo):
        """Add or replace a product by barcode."""
        with self._lock:
            products = self.list_products()
            for index, existing in enumerate(products):
                if existing.barcode == product.barcode:
                    products[index] = product
                    break
            else:
                products.append(product)
            self._write(PRODUCTS_KEY, products)

    def get_product(self, barcode: str) -> Optional[ProductInfo]:
        return next((p for p in self.list_products() if p.barcode == barcode), None)

    def list_products(self) -> List[ProductInfo]:
        return self._read(PRODUCTS_KEY, ProductInfo)

    def remove_product(self, barcode: str) -> bool:
        with self._lock:
            products = self.list_products()
            remaining = [p for p in products if p.barcode != barcode]
            if len(remaining) == len(products):
                return False
            self._write(PRODUCTS_KEY, remaining)
            return True

    def clear_products(self):
        self._remove(PRODUCTS_KEY)

    def get_product_count(self) -> int:
        return len(self.list_products())

    # History

    def add_to_history(self, barcode: str, product: Optional[ProductInfo] = None,
                       scan_date: Optional[datetime] = None) -> HistoryItem:
        item = HistoryItem(
            id=str(uuid.uuid4()),
            barcode=barcode,
            product_name=product.product_name if product else None,
            brand=product.brands if product else None,
            scan_date=scan_date or datetime.now(timezone.utc),
            found=product is not None,
        )
        with self._lock:
            history = [item] + self.get_history()
            self._write(HISTORY_KEY, history[:MAX_HISTORY_ITEMS])
        return item

    def get_history(self) -> List[HistoryItem]:
        """Scan history, most recent first."""
        return self._read(HISTORY_KEY, HistoryItem)

    def clear_history(self):
        self._remove(HISTORY_KEY)

    # Favorites

    def add_to_favorites(self, product: ProductInfo):
        with self._lock:
            favorites = self.get_favorites()
            if not any(f.barcode == product.barcode for f in favorites):
                favorites.append(product)
                self._write(FAVORITES_KEY, favorites)

    def remove_from_favorites(self, barcode: str):
        with self._lock:
            favorites = self.get_favorites()
            self._write(FAVORITES_KEY, [f for f in favorites if f.barcode != barcode])

    def get_favorites(self) -> List[ProductInfo]:
        return self._read(FAVORITES_KEY, ProductInfo)

    def is_favorite(self, barcode: str) -> bool:
        return any(f.barcode == barcode for f in self.get_favorites())
