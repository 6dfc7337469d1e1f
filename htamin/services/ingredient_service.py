"""
Ingredient Service

Catalog lookups and admin curation over the `ingredients` table. Rows are
never hard-deleted; every query here skips tombstoned rows.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from htamin.extensions import db
from htamin.models.ingredient import Ingredient, CookingMethod
from htamin.services.nutrition_helpers import cooking_multiplier, to_float
from htamin.utils.enums import DataSource

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


def _live():
    return Ingredient.query.filter(Ingredient.deleted_at.is_(None))


def _like(term: str) -> str:
    return f"%{term}%"


def get_live_ingredient(ingredient_id: Any) -> Optional[Ingredient]:
    try:
        ingredient_id = int(ingredient_id)
    except (TypeError, ValueError):
        return None
    ingredient = db.session.get(Ingredient, ingredient_id)
    if not ingredient or ingredient.deleted_at is not None:
        return None
    return ingredient


def find_catalog_match(name_mm: Optional[str], name_en: Optional[str]) -> Optional[Ingredient]:
    """
    Best catalog row for an extracted ingredient.

    Case-insensitive substring match on either name over live rows, verified
    or not, most used first. Empty names are not used as search terms.
    """
    clauses = []
    if name_mm and name_mm.strip():
        clauses.append(Ingredient.name_myanmar.ilike(_like(name_mm.strip())))
    if name_en and name_en.strip():
        clauses.append(Ingredient.name_english.ilike(_like(name_en.strip())))
    if not clauses:
        return None

    return (
        _live()
        .filter(or_(*clauses))
        .order_by(Ingredient.usage_count.desc(), Ingredient.id)
        .first()
    )


def search_ingredients(term: str, lang: Optional[str] = None, include_unverified: bool = False,
                       limit: int = 20) -> List[Ingredient]:
    like = _like(term)
    if lang == "mm":
        query = _live().filter(Ingredient.name_myanmar.ilike(like))
    elif lang == "en":
        query = _live().filter(Ingredient.name_english.ilike(like))
    else:
        query = _live().filter(or_(Ingredient.name_myanmar.ilike(like), Ingredient.name_english.ilike(like)))

    if not include_unverified:
        query = query.filter(Ingredient.verified.is_(True))

    return query.order_by(Ingredient.usage_count.desc(), Ingredient.id).limit(limit).all()


def admin_ingredient_query(filter_by: str = "all", search: Optional[str] = None):
    query = _live()
    if filter_by == "verified":
        query = query.filter(Ingredient.verified.is_(True))
    elif filter_by == "pending":
        query = query.filter(Ingredient.verified.is_(False))

    if search and len(search) >= MIN_SEARCH_LENGTH:
        like = _like(search)
        query = query.filter(or_(Ingredient.name_english.ilike(like), Ingredient.name_myanmar.ilike(like)))

    return query.order_by(Ingredient.created_at.desc(), Ingredient.id.desc())


def name_taken(name_english: str, name_myanmar: str) -> bool:
    return _live().filter(or_(
        func.lower(Ingredient.name_english) == name_english.strip().lower(),
        Ingredient.name_myanmar == name_myanmar.strip(),
    )).first() is not None


def create_ingredient(data: Dict[str, Any], source: DataSource, verified_by: Optional[str] = None) -> Ingredient:
    """
    Insert a catalog row.

    Admin rows are verified on creation; user contributions wait for review.
    """
    verified = source in (DataSource.ADMIN, DataSource.DATABASE)
    now = datetime.utcnow()
    ingredient = Ingredient(
        name_english=data["name_english"].strip(),
        name_myanmar=data["name_myanmar"].strip(),
        category=data.get("category") or "other",
        subcategory=data.get("subcategory"),
        calories_per_100g=data["calories_per_100g"],
        protein_g=data.get("protein_g", 0),
        fat_g=data.get("fat_g", 0),
        carbs_g=data.get("carbs_g", 0),
        fiber_g=data.get("fiber_g", 0),
        notes=data.get("notes"),
        data_source=source.value,
        confidence_score=1.0 if verified else 0.5,
        verified=verified,
        verified_by=verified_by if verified else None,
        verified_at=now if verified and verified_by else None,
    )
    db.session.add(ingredient)
    db.session.commit()
    logger.info(f"Ingredient {ingredient.id} '{ingredient.name_english}' created from {source.value}")
    return ingredient


def set_verified(ingredient: Ingredient, verified: bool, admin_id: str) -> Ingredient:
    ingredient.verified = verified
    if verified:
        ingredient.verified_by = admin_id
        ingredient.verified_at = datetime.utcnow()
    else:
        ingredient.verified_by = None
        ingredient.verified_at = None
    db.session.commit()
    logger.info(f"Ingredient {ingredient.id} verified={verified} by {admin_id}")
    return ingredient


def soft_delete(ingredient: Ingredient) -> Ingredient:
    ingredient.deleted_at = datetime.utcnow()
    db.session.commit()
    logger.info(f"Ingredient {ingredient.id} tombstoned")
    return ingredient


def add_cooking_method(ingredient: Ingredient, method_name: str, cooked_calories: Optional[float],
                       water_content_percent: Optional[float] = None, notes: Optional[str] = None) -> CookingMethod:
    """Attach a preparation; the multiplier is derived from the raw calories. Caller commits."""
    method = CookingMethod(ingredient=ingredient, method_name=method_name)
    update_cooking_method(method, cooked_calories, water_content_percent, notes)
    db.session.add(method)
    return method


def update_cooking_method(method: CookingMethod, cooked_calories: Optional[float],
                          water_content_percent: Optional[float] = None, notes: Optional[str] = None) -> CookingMethod:
    """Refresh a preparation in place against its ingredient's current raw calories."""
    cooked = to_float(cooked_calories, None)
    method.calories_per_100g_cooked = cooked
    method.water_content_percent = water_content_percent
    method.calorie_multiplier = (
        cooking_multiplier(method.ingredient.calories_per_100g, cooked) if cooked is not None else 1.0
    )
    method.notes = notes or None
    return method


def record_usage(ingredients: List[Ingredient]) -> None:
    """Bump usage counters in the caller's transaction."""
    now = datetime.utcnow()
    for ingredient in ingredients:
        ingredient.usage_count = (ingredient.usage_count or 0) + 1
        ingredient.last_used_at = now
