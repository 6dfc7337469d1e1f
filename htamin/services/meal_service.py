"""
Meal Service

Persists user-confirmed meals and reads them back.

A meal write moves Pending -> Created (header flushed) -> Committed, or
Pending -> Created -> RolledBack when any item fails. Header and items share
one transaction, so a rolled back write leaves no meal row behind.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from htamin.extensions import db
from htamin.models.ingredient import CookingMethod, Ingredient
from htamin.models.meal import Meal, MealItem
from htamin.models.user import User
from htamin.services.ingredient_service import get_live_ingredient, record_usage
from htamin.services.nutrition_helpers import (
    MACRO_FIELDS,
    default_estimate,
    per_100g_values,
    portion_nutrition,
    round2,
    to_float,
)
from htamin.utils.enums import ConfidenceLevel

logger = logging.getLogger(__name__)

ESTIMATED_CONFIDENCE_THRESHOLD = 0.7


class MealSaveError(Exception):
    """The meal write failed and was rolled back."""


def classify_confidence(database_match: Optional[Any], ai_estimate: Optional[Dict[str, Any]]) -> ConfidenceLevel:
    if database_match:
        return ConfidenceLevel.EXACT
    if not ai_estimate or ai_estimate.get("source") == "default":
        return ConfidenceLevel.GUESSED
    if to_float(ai_estimate.get("confidence")) > ESTIMATED_CONFIDENCE_THRESHOLD:
        return ConfidenceLevel.ESTIMATED
    return ConfidenceLevel.APPROXIMATE


def _catalog_row(entry: Dict[str, Any]) -> Optional[Ingredient]:
    ingredient_id = entry.get("ingredient_id")
    if ingredient_id is None:
        match = (entry.get("ingredient") or {}).get("database_match")
        if isinstance(match, dict):
            ingredient_id = match.get("id")
    if ingredient_id is None:
        return None

    row = get_live_ingredient(ingredient_id)
    if row is None:
        raise ValueError(f"INGREDIENT_NOT_FOUND: ingredient {ingredient_id} is not in the catalog")
    return row


def resolve_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pick the nutrition source for one submitted ingredient.

    The catalog row wins, re-read from the database; otherwise the AI estimate
    sent back by the client; otherwise the fixed default.

    Raises:
        ValueError: referenced catalog row is gone, or the cooking method is
            unknown or not attached to the matched ingredient
    """
    payload = entry.get("ingredient") or {}
    row = _catalog_row(entry)
    estimate = payload.get("ai_estimate") if isinstance(payload.get("ai_estimate"), dict) else None

    if row is not None:
        per_100g = per_100g_values({
            "calories_per_100g": row.calories_per_100g,
            "protein_g": row.protein_g,
            "fat_g": row.fat_g,
            "carbs_g": row.carbs_g,
            "fiber_g": row.fiber_g,
        })
        level = ConfidenceLevel.EXACT
    elif estimate is not None:
        per_100g = per_100g_values(estimate)
        level = classify_confidence(None, estimate)
    else:
        per_100g = per_100g_values(default_estimate())
        level = ConfidenceLevel.GUESSED

    method = None
    method_id = entry.get("cooking_method_id")
    if method_id is not None:
        method = db.session.get(CookingMethod, method_id)
        if method is None or row is None or method.ingredient_id != row.id:
            raise ValueError(f"COOKING_METHOD_INVALID: cooking method {method_id} does not belong to this ingredient")
        per_100g["calories"] = per_100g["calories"] * float(method.calorie_multiplier or 1)

    name = payload.get("name_en") or payload.get("name_mm") or (row.name_english if row else None)
    return {
        "ingredient": row,
        "cooking_method": method,
        "custom_name": name,
        "portion_g": to_float(entry.get("portion_g")),
        "nutrition": portion_nutrition(per_100g, entry.get("portion_g")),
        "confidence_level": level,
        "ai_suggested": bool(entry.get("ai_suggested", True)),
    }


def build_meal_item(meal: Meal, resolved: Dict[str, Any]) -> MealItem:
    nutrition = resolved["nutrition"]
    return MealItem(
        meal=meal,
        ingredient_id=resolved["ingredient"].id if resolved["ingredient"] else None,
        cooking_method_id=resolved["cooking_method"].id if resolved["cooking_method"] else None,
        custom_name=resolved["custom_name"],
        portion_grams=resolved["portion_g"],
        calories=nutrition["calories"],
        protein_g=nutrition["protein_g"],
        fat_g=nutrition["fat_g"],
        carbs_g=nutrition["carbs_g"],
        fiber_g=nutrition["fiber_g"],
        confidence_level=resolved["confidence_level"].value,
        ai_suggested=resolved["ai_suggested"],
        user_confirmed=True,
    )


def save_meal(
    user_id: str,
    entries: List[Dict[str, Any]],
    meal_name: Optional[str] = None,
    meal_type: Optional[str] = None,
    eaten_at: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Store a meal and its items.

    Args:
        user_id: Owner of the meal
        entries: [{"ingredient": enriched dict, "portion_g": float, ...}]

    Returns:
        The serialized meal with its items

    Raises:
        ValueError: unknown user or invalid entry (nothing written)
        MealSaveError: database failure after rollback
    """
    user = db.session.get(User, user_id)
    if not user or user.deleted_at is not None:
        raise ValueError("USER_NOT_FOUND: user_id does not exist")

    resolved = [resolve_entry(entry) for entry in entries]

    meal = Meal(
        user_id=user_id,
        meal_name=meal_name,
        meal_type=meal_type,
        notes=notes,
        eaten_at=eaten_at or datetime.utcnow(),
        ai_generated=any(r["ai_suggested"] for r in resolved),
    )
    try:
        db.session.add(meal)
        db.session.flush()
        logger.info(f"Meal {meal.id} created for user {user_id}")

        items = [build_meal_item(meal, r) for r in resolved]
        db.session.add_all(items)

        totals = {field: round2(sum(float(getattr(item, field)) for item in items)) for field in MACRO_FIELDS}
        meal.total_calories = totals["calories"]
        meal.total_protein_g = totals["protein_g"]
        meal.total_fat_g = totals["fat_g"]
        meal.total_carbs_g = totals["carbs_g"]
        meal.total_fiber_g = totals["fiber_g"]

        record_usage([r["ingredient"] for r in resolved if r["ingredient"] is not None])
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Meal write for user {user_id} rolled back: {e}")
        raise MealSaveError(str(e)) from e

    logger.info(f"Meal {meal.id} committed with {len(items)} items")
    return serialize_meal(meal)


def serialize_meal_item(item: MealItem) -> Dict[str, Any]:
    ingredient = item.ingredient
    return {
        "id": item.id,
        "meal_id": item.meal_id,
        "ingredient_id": item.ingredient_id,
        "cooking_method_id": item.cooking_method_id,
        "name": ingredient.name_english if ingredient else item.custom_name,
        "portion_grams": float(item.portion_grams),
        "calories": float(item.calories),
        "protein_g": float(item.protein_g),
        "fat_g": float(item.fat_g),
        "carbs_g": float(item.carbs_g),
        "fiber_g": float(item.fiber_g),
        "confidence_level": item.confidence_level,
        "ai_suggested": item.ai_suggested,
        "user_confirmed": item.user_confirmed,
        "ingredients": {
            "name_english": ingredient.name_english,
            "name_myanmar": ingredient.name_myanmar,
            "category": ingredient.category,
        } if ingredient else None,
    }


def serialize_meal(meal: Meal) -> Dict[str, Any]:
    return {
        "id": meal.id,
        "user_id": meal.user_id,
        "meal_type": meal.meal_type,
        "meal_name": meal.meal_name,
        "notes": meal.notes,
        "eaten_at": meal.eaten_at.isoformat() if meal.eaten_at else None,
        "total_calories": float(meal.total_calories),
        "total_protein_g": float(meal.total_protein_g),
        "total_fat_g": float(meal.total_fat_g),
        "total_carbs_g": float(meal.total_carbs_g),
        "total_fiber_g": float(meal.total_fiber_g),
        "ai_generated": meal.ai_generated,
        "created_at": meal.created_at.isoformat() if meal.created_at else None,
        "meal_items": [serialize_meal_item(item) for item in meal.items],
    }


def meals_on(user_id: str, day: date) -> List[Meal]:
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1)
    return (
        Meal.query
        .filter(Meal.user_id == user_id)
        .filter(Meal.deleted_at.is_(None))
        .filter(Meal.eaten_at >= start, Meal.eaten_at < end)
        .order_by(Meal.eaten_at.desc(), Meal.id.desc())
        .all()
    )


def list_meals(user_id: str, day: date) -> List[Dict[str, Any]]:
    return [serialize_meal(meal) for meal in meals_on(user_id, day)]


def daily_summary(user_id: str, day: date) -> Dict[str, Any]:
    """Day totals, calories per meal type and the user's calorie goal."""
    meals = meals_on(user_id, day)
    user = db.session.get(User, user_id)

    summary = {
        "date": day.isoformat(),
        "goal_calories": user.daily_calorie_target if user else 2000,
        "total_calories": round2(sum(float(m.total_calories) for m in meals)),
        "total_protein_g": round2(sum(float(m.total_protein_g) for m in meals)),
        "total_fat_g": round2(sum(float(m.total_fat_g) for m in meals)),
        "total_carbs_g": round2(sum(float(m.total_carbs_g) for m in meals)),
        "total_fiber_g": round2(sum(float(m.total_fiber_g) for m in meals)),
        "calories_by_type": {},
        "meals": [],
    }
    for meal in meals:
        key = meal.meal_type or "other"
        summary["calories_by_type"][key] = round2(summary["calories_by_type"].get(key, 0) + float(meal.total_calories))
        summary["meals"].append({
            "meal_type": meal.meal_type,
            "calories": float(meal.total_calories),
            "items": [item.ingredient.name_english if item.ingredient else (item.custom_name or "?") for item in meal.items],
        })
    return summary
