from dataclasses import dataclass
from typing import List, Tuple

from .models import IngredientCategory, IngredientInfo, SafetyLevel


@dataclass(frozen=True)
class IngredientRule:
    patterns: Tuple[str, ...]
    category: IngredientCategory
    safety_level: SafetyLevel
    description: str
    benefits: Tuple[str, ...] = ()
    concerns: Tuple[str, ...] = ()

    def matches(self, lowercased: str) -> bool:
        return any(pattern in lowercased for pattern in self.patterns)

    def classify(self, ingredient_name: str) -> IngredientInfo:
        return IngredientInfo(
            name=ingredient_name,
            category=self.category,
            description=self.description,
            safety_level=self.safety_level,
            benefits=list(self.benefits),
            concerns=list(self.concerns),
        )


# Evaluated top to bottom, first match wins. Beneficial rules must stay ahead
# of the concerning ones, and both ahead of the moderate ones.
INGREDIENT_RULES: List[IngredientRule] = [
    # Beneficial
    IngredientRule(
        patterns=("ceramide",),
        category=IngredientCategory.MOISTURIZER,
        safety_level=SafetyLevel.EXCELLENT,
        description="Skin-repairing lipid that strengthens the skin barrier",
        benefits=("Strengthens skin barrier", "Reduces moisture loss", "Anti-aging properties"),
    ),
    IngredientRule(
        patterns=("niacinamide",),
        category=IngredientCategory.ANTIOXIDANT,
        safety_level=SafetyLevel.EXCELLENT,
        description="Vitamin B3 derivative with multiple skin benefits",
        benefits=("Reduces inflammation", "Minimizes pores", "Improves skin texture"),
    ),
    IngredientRule(
        patterns=("glycerin", "glycerol"),
        category=IngredientCategory.HUMECTANT,
        safety_level=SafetyLevel.EXCELLENT,
        description="Natural humectant that draws moisture to the skin",
        benefits=("Deep hydration", "Non-irritating", "Suitable for all skin types"),
    ),
    IngredientRule(
        patterns=("hyaluronic acid",),
        category=IngredientCategory.HUMECTANT,
        safety_level=SafetyLevel.EXCELLENT,
        description="Powerful hydrating ingredient that holds 1000x its weight in water",
        benefits=("Intense hydration", "Plumps skin", "Reduces fine lines"),
    ),
    IngredientRule(
        patterns=("vitamin c", "ascorbic acid"),
        category=IngredientCategory.ANTIOXIDANT,
        safety_level=SafetyLevel.GOOD,
        description="Powerful antioxidant that brightens and protects skin",
        benefits=("Brightens skin", "Fights free radicals", "Stimulates collagen"),
        concerns=("May cause irritation in sensitive skin",),
    ),
    # Concerning
    IngredientRule(
        patterns=("sodium lauryl sulfate", "sodium laureth sulfate", "sls"),
        category=IngredientCategory.SURFACTANT,
        safety_level=SafetyLevel.CONCERNING,
        description="Harsh cleansing agent that can strip natural oils",
        benefits=("Effective cleansing",),
        concerns=("Can cause dryness", "May irritate sensitive skin", "Strips natural oils"),
    ),
    IngredientRule(
        patterns=("paraben",),
        category=IngredientCategory.PRESERVATIVE,
        safety_level=SafetyLevel.CONCERNING,
        description="Synthetic preservative with potential health concerns",
        benefits=("Prevents bacterial growth",),
        concerns=("Potential hormone disruption", "May cause allergic reactions"),
    ),
    IngredientRule(
        patterns=("sodium benzoate",),
        category=IngredientCategory.PRESERVATIVE,
        safety_level=SafetyLevel.CONCERNING,
        description="Preservative that may form benzene when combined with vitamin C",
        benefits=("Prevents bacterial growth",),
        concerns=("May form carcinogenic benzene", "Can cause skin irritation"),
    ),
    # Moderate
    IngredientRule(
        patterns=("peg",),
        category=IngredientCategory.SURFACTANT,
        safety_level=SafetyLevel.MODERATE,
        description="Polyethylene glycol compound that may contain impurities",
        benefits=("Helps ingredients penetrate skin",),
        concerns=("May contain harmful impurities", "Can cause skin irritation"),
    ),
    IngredientRule(
        patterns=("fragrance", "parfum"),
        category=IngredientCategory.FRAGRANCE,
        safety_level=SafetyLevel.MODERATE,
        description="Synthetic fragrance that may cause allergic reactions",
        benefits=("Pleasant scent",),
        concerns=("May cause allergic reactions", "Can irritate sensitive skin"),
    ),
]

DEFAULT_RULE = IngredientRule(
    patterns=(),
    category=IngredientCategory.OTHER,
    safety_level=SafetyLevel.MODERATE,
    description="Ingredient with limited safety data",
    concerns=("Limited safety information available",),
)


def find_rule(ingredient_name: str) -> IngredientRule:
    lowercased = ingredient_name.lower()
    for rule in INGREDIENT_RULES:
        if rule.matches(lowercased):
            return rule
    return DEFAULT_RULE


def get_ingredient_info(ingredient_name: str) -> IngredientInfo:
    """Classify a single ingredient name against the rule table.

    Matching is a case-insensitive substring test. Names no rule recognises
    get a moderate "other" classification.
    """
    return find_rule(ingredient_name).classify(ingredient_name)
