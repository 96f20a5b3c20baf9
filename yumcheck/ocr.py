import re
from typing import List, Optional

from .gemini_client import GeminiClient
from .models import OCRResponse

LABEL_PREFIX = re.compile(r"(?:INGREDIENTS?|INGREDIENTES?|INGRÉDIENTS?|CONTAINS?)\s*:\s*", re.I)

# Tried in order; only the first one present in the text is used.
# Line breaks are already collapsed to spaces by then.
SEPARATORS = [",", ";", "•", "·", "▪", "▫"]

MIN_INGREDIENT_LENGTH = 3


def _split_ingredients(text: str) -> List[str]:
    for separator in SEPARATORS:
        if separator in text:
            return text.split(separator)
    return [text]


def clean_ingredients_text(text: str) -> str:
    """Turn raw label text into a comma separated ingredient list.

    >>> clean_ingredients_text("INGREDIENTS: AQUA, GLYCERIN,  PARFUM")
    'Aqua, Glycerin, Parfum'
    """
    cleaned = text.replace("|", "I")
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    match = LABEL_PREFIX.search(cleaned)
    if match:
        cleaned = cleaned[match.end():]

    ingredients = []
    for ingredient in _split_ingredients(cleaned):
        ingredient = re.sub(r"\s+", " ", ingredient).strip()
        if len(ingredient) < MIN_INGREDIENT_LENGTH:
            continue
        ingredients.append(ingredient[0].upper() + ingredient[1:].lower())

    return ", ".join(ingredients)


class TextRecognitionService:
    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    def recognize_ingredients(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> OCRResponse:
        raw_text = self.client.extract_text(image_bytes, mime_type)
        return OCRResponse(raw_text=raw_text, ingredients_text=clean_ingredients_text(raw_text))
