import logging
import os
from typing import List

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from .analyzer import ProductAnalyzer
from .errors import (
    AddProductError,
    ProductLookupError,
    TextRecognitionError,
    TextRecognitionErrorKind,
)
from .local_database import LocalDatabase
from .models import ClearCacheRequest, FavoriteStatus, HistoryItem, OCRResponse, ProductAnalysis, ProductInfo
from .ocr import TextRecognitionService
from .product_service import ProductService

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="YumCheck Product Safety API",
    description="Look up cosmetic products by barcode and analyze their ingredients for safety",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

analyzer = ProductAnalyzer()
local_db = LocalDatabase()
product_service = ProductService(local_db=local_db)
text_recognition = TextRecognitionService()


def _lookup(barcode: str) -> ProductInfo:
    # ProductService reports every unresolved lookup as not found.
    try:
        product = product_service.get_product(barcode)
    except ProductLookupError as e:
        local_db.add_to_history(barcode, None)
        raise HTTPException(status_code=404, detail=e.description)
    local_db.add_to_history(barcode, product)
    return product


@app.get("/")
async def root():
    return {"message": "YumCheck Product Safety API"}


@app.get("/products/{barcode}", response_model=ProductInfo)
def get_product(barcode: str):
    """
    Look a product up by barcode.

    Checks the local cache, then the cloud database, then Open Beauty Facts.
    Every lookup is recorded in the scan history.
    """
    return _lookup(barcode)


@app.post("/products", response_model=ProductInfo, status_code=201)
def add_product(product: ProductInfo):
    """Contribute a product. It is kept locally even if the cloud insert fails."""
    try:
        product_service.add_product(product)
    except AddProductError as e:
        logger.warning("Cloud insert for %s failed: %s", product.barcode, e)
        raise HTTPException(status_code=502, detail=f"Saved locally only. {e.description}")
    return product


@app.delete("/products/{barcode}")
def remove_product(barcode: str):
    if not local_db.remove_product(barcode):
        raise HTTPException(status_code=404, detail="Product not in local database")
    return {"message": f"Removed {barcode} from local database"}


@app.get("/products/{barcode}/analysis", response_model=ProductAnalysis)
def analyze_barcode(barcode: str):
    return analyzer.analyze_product(_lookup(barcode))


@app.post("/analyze_product/", response_model=ProductAnalysis)
def analyze_product(product: ProductInfo):
    """
    Analyze a product's ingredients for safety.

    Returns:
    - Safety score from 1 to 5 and an overall verdict
    - Beneficial, concerning and neutral ingredients
    - Skin type compatibility, recommendations and usage tips
    """
    return analyzer.analyze_product(product)


@app.get("/history", response_model=List[HistoryItem])
def get_history():
    return local_db.get_history()


@app.delete("/history")
def clear_history():
    local_db.clear_history()
    return {"message": "Scan history cleared"}


@app.get("/favorites", response_model=List[ProductInfo])
def get_favorites():
    return local_db.get_favorites()


@app.post("/favorites", response_model=FavoriteStatus)
def add_favorite(product: ProductInfo):
    local_db.add_to_favorites(product)
    return FavoriteStatus(barcode=product.barcode, favorite=True)


@app.get("/favorites/{barcode}", response_model=FavoriteStatus)
def is_favorite(barcode: str):
    return FavoriteStatus(barcode=barcode, favorite=local_db.is_favorite(barcode))


@app.delete("/favorites/{barcode}", response_model=FavoriteStatus)
def remove_favorite(barcode: str):
    local_db.remove_from_favorites(barcode)
    return FavoriteStatus(barcode=barcode, favorite=False)


@app.post("/ocr", response_model=OCRResponse)
def recognize_label(file: UploadFile = File(...)):
    """Read the ingredient list off a label photo."""
    image_bytes = file.file.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="Empty image upload")

    try:
        return text_recognition.recognize_ingredients(image_bytes, file.content_type or "image/jpeg")
    except TextRecognitionError as e:
        if e.kind == TextRecognitionErrorKind.NOT_CONFIGURED:
            raise HTTPException(status_code=503, detail=e.description)
        if e.kind == TextRecognitionErrorKind.NO_TEXT_FOUND:
            raise HTTPException(status_code=422, detail=e.description)
        raise HTTPException(status_code=502, detail=e.description)


@app.post("/clear_cache/")
def clear_cache(request: ClearCacheRequest):
    """Clear the local product cache. Requires admin password."""
    admin_password = os.getenv("ADMIN_PASSWORD")

    if not admin_password:
        raise HTTPException(status_code=500, detail="Admin password not configured")

    if request.password != admin_password:
        raise HTTPException(status_code=401, detail="Invalid password")

    local_db.clear_products()
    return {"message": "All cache cleared successfully!"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
