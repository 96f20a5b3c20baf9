import logging
from typing import Optional

from .cloud_database import CloudProductDatabase
from .errors import ProductLookupError
from .local_database import LocalDatabase
from .models import ProductInfo
from .open_beauty_facts import OpenBeautyFactsClient

logger = logging.getLogger(__name__)


class ProductService:
    """Barcode lookup across the local cache, the cloud database and Open Beauty Facts."""

    def __init__(self, local_db: Optional[LocalDatabase] = None,
                 cloud_db: Optional[CloudProductDatabase] = None,
                 open_beauty_facts: Optional[OpenBeautyFactsClient] = None):
        self.local_db = local_db or LocalDatabase()
        self.cloud_db = cloud_db or CloudProductDatabase()
        self.open_beauty_facts = open_beauty_facts or OpenBeautyFactsClient()

    def get_product(self, barcode: str) -> ProductInfo:
        """Find a product, caching remote hits locally.

        Raises ProductLookupError (not found) when no source knows the barcode.
        """
        local_product = self.local_db.get_product(barcode)
        if local_product:
            logger.info("Found %s in the local database", barcode)
            return local_product

        try:
            product = self.cloud_db.get_product(barcode)
            logger.info("Found %s in the cloud database", barcode)
        except ProductLookupError as cloud_error:
            logger.warning("Cloud lookup for %s failed: %s", barcode, cloud_error)
            try:
                product = self.open_beauty_facts.fetch_product(barcode)
                logger.info("Found %s in Open Beauty Facts", barcode)
            except ProductLookupError as obf_error:
                logger.warning("Open Beauty Facts lookup for %s failed: %s", barcode, obf_error)
                raise ProductLookupError.not_found() from obf_error

        self.local_db.save_product(product)
        return product

    def add_product(self, product: ProductInfo):
        """Store a user-contributed product locally, then push it to the cloud.

        The local copy is kept even when the cloud insert raises AddProductError.
        """
        self.local_db.save_product(product)
        self.cloud_db.add_product(product)
