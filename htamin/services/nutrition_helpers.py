"""
Nutrition Helper Functions

Contains utility functions shared by the catalog, enrichment and meal services:
- Rounding policy for stored nutrition values
- Portion scaling of per-100g macros
- Cooking method multiplier derivation
- Ingredient serialization
"""

import math
from typing import Any, Dict, Optional

from htamin.models.ingredient import Ingredient, CookingMethod

MACRO_FIELDS = ("calories", "protein_g", "fat_g", "carbs_g", "fiber_g")

# Per-100g values used when the AI estimate cannot be obtained
DEFAULT_NUTRITION_ESTIMATE = {
    "calories_per_100g": 100.0,
    "protein_g": 5.0,
    "fat_g": 3.0,
    "carbs_g": 15.0,
    "fiber_g": 1.0,
    "confidence": 0.3,
    "source": "default",
}


def round2(value: float) -> float:
    """Round half up at the hundredths digit."""
    return math.floor(float(value) * 100 + 0.5) / 100


def to_float(value: Any, default: float = 0.0) -> float:
    try:
        if value is None:
            return default
        return float(value)
    except (TypeError, ValueError):
        return default


def default_estimate() -> Dict[str, Any]:
    return dict(DEFAULT_NUTRITION_ESTIMATE)


def cooking_multiplier(raw_calories: float, cooked_calories: float) -> float:
    """Cooked/raw calorie ratio; 1.0 when the raw value is zero."""
    raw = to_float(raw_calories)
    if raw <= 0:
        return 1.0
    return round2(to_float(cooked_calories) / raw)


def per_100g_values(source: Dict[str, Any]) -> Dict[str, float]:
    """
    Normalize a catalog row dict or an AI estimate into per-100g macros.

    Both shapes carry `calories_per_100g`; the remaining keys share names.
    """
    return {
        "calories": to_float(source.get("calories_per_100g")),
        "protein_g": to_float(source.get("protein_g")),
        "fat_g": to_float(source.get("fat_g")),
        "carbs_g": to_float(source.get("carbs_g")),
        "fiber_g": to_float(source.get("fiber_g")),
    }


def portion_nutrition(per_100g: Dict[str, float], portion_g: float) -> Dict[str, float]:
    """
    Scale per-100g macros to a portion.

    Args:
        per_100g: Dictionary keyed by MACRO_FIELDS
        portion_g: Portion in grams

    Returns:
        Dictionary keyed by MACRO_FIELDS, rounded with round2
    """
    multiplier = to_float(portion_g) / 100.0
    return {field: round2(to_float(per_100g.get(field)) * multiplier) for field in MACRO_FIELDS}


def serialize_ingredient(ingredient: Ingredient, full: bool = False) -> Dict[str, Any]:
    data = {
        "id": ingredient.id,
        "name_english": ingredient.name_english,
        "name_myanmar": ingredient.name_myanmar,
        "category": ingredient.category,
        "calories_per_100g": float(ingredient.calories_per_100g or 0),
        "protein_g": float(ingredient.protein_g or 0),
        "fat_g": float(ingredient.fat_g or 0),
        "carbs_g": float(ingredient.carbs_g or 0),
        "fiber_g": float(ingredient.fiber_g or 0),
        "verified": bool(ingredient.verified),
        "data_source": ingredient.data_source,
    }
    if full:
        data.update({
            "subcategory": ingredient.subcategory,
            "confidence_score": float(ingredient.confidence_score or 0),
            "verified_by": ingredient.verified_by,
            "verified_at": _iso(ingredient.verified_at),
            "usage_count": ingredient.usage_count,
            "notes": ingredient.notes,
            "created_at": _iso(ingredient.created_at),
            "updated_at": _iso(ingredient.updated_at),
        })
    return data


def serialize_cooking_method(method: CookingMethod) -> Dict[str, Any]:
    return {
        "id": method.id,
        "ingredient_id": method.ingredient_id,
        "method_name": method.method_name,
        "calorie_multiplier": float(method.calorie_multiplier or 1),
        "calories_per_100g_cooked": to_float(method.calories_per_100g_cooked, None),
        "water_content_percent": to_float(method.water_content_percent, None),
    }


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None
