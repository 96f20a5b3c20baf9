import logging
import re
from typing import Iterable, List, Optional

from .knowledge_base import get_ingredient_info
from .models import (
    IngredientAnalysis,
    IngredientCategory,
    IngredientInfo,
    NaturalSyntheticRatio,
    ProductAnalysis,
    ProductInfo,
    SafetyLevel,
    SafetyVerdict,
    SkinType,
)

logger = logging.getLogger(__name__)

INGREDIENT_SEPARATORS = re.compile(r"[,;]")

MIN_SCORE = 1
MAX_SCORE = 5

SAFETY_DEDUCTIONS = {
    SafetyLevel.EXCELLENT: 0,
    SafetyLevel.GOOD: 0,
    SafetyLevel.MODERATE: 1,
    SafetyLevel.CONCERNING: 2,
    SafetyLevel.HARMFUL: 3,
}

# These keyword lists overlap with the knowledge base on purpose and are
# scored independently of it. Do not merge them.
BENEFICIAL_KEYWORDS = ["ceramide", "niacinamide", "glycerin", "hyaluronic", "vitamin c", "retinol", "peptide"]
BENEFICIAL_BONUS_THRESHOLD = 3

HARMFUL_ADDITIVE_KEYWORDS = ["sodium benzoate", "paraben", "formaldehyde", "triclosan"]

NATURAL_KEYWORDS = ["extract", "oil", "butter", "wax", "glycerin", "vitamin", "mineral"]
SYNTHETIC_KEYWORDS = ["sulfate", "paraben", "peg", "silicone", "synthetic"]

MAX_HIGHLIGHTS = 3


def parse_ingredients(ingredients_text: Optional[str]) -> List[str]:
    """Split raw ingredient text on commas and semicolons, dropping blanks."""
    if not ingredients_text:
        return []
    parts = (part.strip() for part in INGREDIENT_SEPARATORS.split(ingredients_text))
    return [part for part in parts if part]


def parse_additives(labels: Iterable[str]) -> List[str]:
    return [label for label in labels if "additive" in label.lower()]


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    lowercased = text.lower()
    return any(keyword in lowercased for keyword in keywords)


def is_beneficial_ingredient(ingredient: str) -> bool:
    return _contains_any(ingredient, BENEFICIAL_KEYWORDS)


def is_harmful_additive(additive: str) -> bool:
    return _contains_any(additive, HARMFUL_ADDITIVE_KEYWORDS)


def determine_verdict(safety_score: int) -> SafetyVerdict:
    if 4 <= safety_score <= 5:
        return SafetyVerdict.GENERALLY_SAFE
    if 2 <= safety_score <= 3:
        return SafetyVerdict.USE_WITH_CAUTION
    return SafetyVerdict.NOT_RECOMMENDED


class ProductAnalyzer:
    """Rule-based ingredient safety analysis for a single product.

    Stateless: every call to ``analyze_product`` recomputes the result from the
    product snapshot and the static knowledge base, so one instance can be
    shared between request handlers.
    """

    def analyze_product(self, product: ProductInfo) -> ProductAnalysis:
        logger.info("Analyzing product %s (%s)", product.barcode, product.product_name or "Unknown")

        ingredients = parse_ingredients(product.ingredients_text)
        additives = parse_additives(product.labels)
        logger.debug("Parsed ingredients: %s", ingredients)
        logger.debug("Parsed additives: %s", additives)

        safety_score = self.calculate_safety_score(ingredients, additives)
        overall_verdict = determine_verdict(safety_score)
        ingredient_analysis = self.analyze_ingredients(ingredients)
        logger.debug("Safety score %d, verdict %s", safety_score, overall_verdict.value)

        main_concerns = self._extract_main_concerns(ingredient_analysis)

        return ProductAnalysis(
            safety_score=safety_score,
            overall_verdict=overall_verdict,
            key_benefits=self._extract_key_benefits(ingredient_analysis),
            main_concerns=main_concerns,
            ingredient_analysis=ingredient_analysis,
            recommendations=self._generate_recommendations(ingredient_analysis, overall_verdict),
            skin_type_compatibility=self._determine_skin_type_compatibility(ingredient_analysis),
            alternative_suggestions=self._generate_alternative_suggestions(main_concerns),
            usage_tips=self._generate_usage_tips(ingredient_analysis),
        )

    # Scoring

    def calculate_safety_score(self, ingredients: List[str], additives: List[str]) -> int:
        score = MAX_SCORE

        for ingredient in ingredients:
            score -= SAFETY_DEDUCTIONS[get_ingredient_info(ingredient).safety_level]

        for additive in additives:
            if is_harmful_additive(additive):
                score -= 1

        beneficial_count = sum(1 for ingredient in ingredients if is_beneficial_ingredient(ingredient))
        if beneficial_count >= BENEFICIAL_BONUS_THRESHOLD:
            score += 1

        return max(MIN_SCORE, min(MAX_SCORE, score))

    # Ingredient breakdown

    def analyze_ingredients(self, ingredients: List[str]) -> IngredientAnalysis:
        beneficial: List[IngredientInfo] = []
        concerning: List[IngredientInfo] = []
        neutral: List[IngredientInfo] = []

        for ingredient in ingredients:
            info = get_ingredient_info(ingredient)
            if info.safety_level in (SafetyLevel.EXCELLENT, SafetyLevel.GOOD):
                beneficial.append(info)
            elif info.safety_level in (SafetyLevel.CONCERNING, SafetyLevel.HARMFUL):
                concerning.append(info)
            else:
                neutral.append(info)

        return IngredientAnalysis(
            beneficial=beneficial,
            concerning=concerning,
            neutral=neutral,
            natural_vs_synthetic=self.calculate_natural_synthetic_ratio(ingredients),
        )

    def calculate_natural_synthetic_ratio(self, ingredients: List[str]) -> NaturalSyntheticRatio:
        natural_ingredients = []
        synthetic_ingredients = []

        for ingredient in ingredients:
            if _contains_any(ingredient, NATURAL_KEYWORDS):
                natural_ingredients.append(ingredient)
            elif _contains_any(ingredient, SYNTHETIC_KEYWORDS):
                synthetic_ingredients.append(ingredient)

        total = len(ingredients)
        natural_percentage = len(natural_ingredients) / total * 100 if total else 0.0
        synthetic_percentage = len(synthetic_ingredients) / total * 100 if total else 0.0

        return NaturalSyntheticRatio(
            natural_percentage=natural_percentage,
            synthetic_percentage=synthetic_percentage,
            natural_ingredients=natural_ingredients,
            synthetic_ingredients=synthetic_ingredients,
        )

    # Derived views

    def _extract_key_benefits(self, analysis: IngredientAnalysis) -> List[str]:
        return [
            info.benefits[0] if info.benefits else f"Contains beneficial {info.name}"
            for info in analysis.beneficial[:MAX_HIGHLIGHTS]
        ]

    def _extract_main_concerns(self, analysis: IngredientAnalysis) -> List[str]:
        return [
            info.concerns[0] if info.concerns else f"Contains concerning {info.name}"
            for info in analysis.concerning[:MAX_HIGHLIGHTS]
        ]

    def _generate_recommendations(self, analysis: IngredientAnalysis, verdict: SafetyVerdict) -> List[str]:
        recommendations = []

        if verdict == SafetyVerdict.GENERALLY_SAFE:
            recommendations.append("This product appears safe for most skin types")
            if analysis.beneficial:
                recommendations.append("Contains beneficial ingredients for skin health")
        elif verdict == SafetyVerdict.USE_WITH_CAUTION:
            recommendations.append("Consider patch testing before full use")
            recommendations.append("Monitor for any skin reactions")
        else:
            recommendations.append("Consider alternative products with safer ingredients")
            recommendations.append("Consult a dermatologist if you have sensitive skin")

        if any(info.category == IngredientCategory.FRAGRANCE for info in analysis.concerning):
            recommendations.append("Avoid if you have fragrance sensitivities")

        return recommendations

    def _determine_skin_type_compatibility(self, analysis: IngredientAnalysis) -> List[SkinType]:
        compatible = {SkinType.NORMAL}

        beneficial_names = [info.name.lower() for info in analysis.beneficial]
        if any("ceramide" in name or "glycerin" in name for name in beneficial_names):
            compatible.add(SkinType.DRY)
        if any("niacinamide" in name for name in beneficial_names):
            compatible.update((SkinType.OILY, SkinType.ACNE_PRONE))
        if any("hyaluronic" in name for name in beneficial_names):
            compatible.add(SkinType.MATURE)

        concerning_names = [info.name.lower() for info in analysis.concerning]
        if not any("fragrance" in name or "sulfate" in name for name in concerning_names):
            compatible.add(SkinType.SENSITIVE)

        # Set semantics, but emitted in enum order so responses are stable
        return [skin_type for skin_type in SkinType if skin_type in compatible]

    def _generate_alternative_suggestions(self, concerns: List[str]) -> List[str]:
        suggestions = []
        lowered = [concern.lower() for concern in concerns]

        if any("sulfate" in concern for concern in lowered):
            suggestions.append("Look for sulfate-free cleansers")
        if any("paraben" in concern for concern in lowered):
            suggestions.append("Choose paraben-free alternatives")
        if any("fragrance" in concern for concern in lowered):
            suggestions.append("Opt for fragrance-free products")

        if not suggestions:
            suggestions.append("Look for products with ceramides and hyaluronic acid")

        return suggestions

    def _generate_usage_tips(self, analysis: IngredientAnalysis) -> List[str]:
        tips = []

        beneficial_names = [info.name.lower() for info in analysis.beneficial]
        if any("vitamin c" in name for name in beneficial_names):
            tips.append("Use in the morning for antioxidant protection")
        if any("retinol" in name for name in beneficial_names):
            tips.append("Start with 2-3 times per week and use at night")

        if any("sulfate" in info.name.lower() for info in analysis.concerning):
            tips.append("Follow with a gentle, hydrating moisturizer")

        if not tips:
            tips.append("Always patch test new products")
            tips.append("Use as directed on the packaging")

        return tips
