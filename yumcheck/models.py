from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SafetyVerdict(str, Enum):
    GENERALLY_SAFE = "Generally Safe"
    USE_WITH_CAUTION = "Use with Caution"
    NOT_RECOMMENDED = "Not Recommended"


class IngredientCategory(str, Enum):
    MOISTURIZER = "Moisturizer"
    PRESERVATIVE = "Preservative"
    SURFACTANT = "Surfactant"
    ANTIOXIDANT = "Antioxidant"
    EMOLLIENT = "Emollient"
    HUMECTANT = "Humectant"
    FRAGRANCE = "Fragrance"
    COLORANT = "Colorant"
    OTHER = "Other"


class SafetyLevel(str, Enum):
    """Per-ingredient safety, declared best to worst."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    CONCERNING = "Concerning"
    HARMFUL = "Harmful"


class SkinType(str, Enum):
    SENSITIVE = "Sensitive"
    DRY = "Dry"
    OILY = "Oily"
    COMBINATION = "Combination"
    NORMAL = "Normal"
    ACNE_PRONE = "Acne-Prone"
    MATURE = "Mature"


class ProductInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    barcode: str
    product_name: Optional[str] = None
    brands: Optional[str] = None
    ingredients_text: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[str] = None
    image_front_url: Optional[str] = None
    image_ingredients_url: Optional[str] = None
    image_packaging_url: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    eco_score: Optional[str] = None
    allergens: List[str] = Field(default_factory=list)


class IngredientInfo(BaseModel):
    name: str
    category: IngredientCategory
    description: str
    safety_level: SafetyLevel
    benefits: List[str]
    concerns: List[str]


class NaturalSyntheticRatio(BaseModel):
    natural_percentage: float
    synthetic_percentage: float
    natural_ingredients: List[str]
    synthetic_ingredients: List[str]


class IngredientAnalysis(BaseModel):
    beneficial: List[IngredientInfo]
    concerning: List[IngredientInfo]
    neutral: List[IngredientInfo]
    natural_vs_synthetic: NaturalSyntheticRatio


class ProductAnalysis(BaseModel):
    safety_score: int = Field(ge=1, le=5)
    overall_verdict: SafetyVerdict
    key_benefits: List[str]
    main_concerns: List[str]
    ingredient_analysis: IngredientAnalysis
    recommendations: List[str]
    skin_type_compatibility: List[SkinType]
    alternative_suggestions: List[str]
    usage_tips: List[str]


class HistoryItem(BaseModel):
    id: str
    barcode: str
    product_name: Optional[str] = None
    brand: Optional[str] = None
    scan_date: datetime
    found: bool


class SupabaseAttributes(BaseModel):
    ingredients: Optional[List[str]] = None
    claims: Optional[List[str]] = None
    packaging: Optional[str] = None
    certifications: Optional[List[str]] = None
    image_url: Optional[str] = None
    nutrition_grade: Optional[str] = None
    allergens: Optional[List[str]] = None
    additives: Optional[List[str]] = None
    ecoscore_grade: Optional[str] = None


class SupabaseProduct(BaseModel):
    barcode: str
    name: str
    brand: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[str] = None
    attributes: SupabaseAttributes
    created_at: str
    updated_at: str


class OCRResponse(BaseModel):
    raw_text: str
    ingredients_text: str


class FavoriteStatus(BaseModel):
    barcode: str
    favorite: bool


class ClearCacheRequest(BaseModel):
    password: str
