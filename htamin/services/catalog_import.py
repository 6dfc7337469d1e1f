"""
Catalog Import

Loads the Myanmar food CSV. Each CSV row is one (ingredient, cooking method)
pair; rows are grouped per ingredient, the "Raw" row (or the first row when
there is none) supplies the base per-100g values and every row becomes a
cooking method of that ingredient.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from htamin.extensions import db
from htamin.models.ingredient import Ingredient
from htamin.services.ingredient_service import add_cooking_method, update_cooking_method
from htamin.services.nutrition_helpers import to_float
from htamin.utils.enums import DataSource

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name_english", "name_myanmar", "category", "calories_per_100g_raw", "cooking_method")


def group_rows(rows: Iterable[Dict[str, str]]) -> Dict[Tuple[str, str], List[Dict[str, str]]]:
    groups: Dict[Tuple[str, str], List[Dict[str, str]]] = {}
    for row in rows:
        if any(not (row.get(col) or "").strip() for col in REQUIRED_COLUMNS):
            logger.warning(f"Skipping incomplete row: {row.get('food_id') or row.get('name_english')}")
            continue
        key = (row["name_english"].strip(), row["name_myanmar"].strip())
        groups.setdefault(key, []).append(row)
    return groups


def base_row(variations: List[Dict[str, str]]) -> Dict[str, str]:
    for row in variations:
        if row["cooking_method"].strip().lower() == "raw":
            return row
    logger.warning(
        f"No Raw version for '{variations[0]['name_english']}', using '{variations[0]['cooking_method']}' as base"
    )
    return variations[0]


def import_catalog_rows(rows: Iterable[Dict[str, str]]) -> Dict[str, int]:
    """
    Insert or update ingredients and their cooking methods.

    Existing live ingredients with the same English and Myanmar names are
    updated in place. Cooking methods are matched by name and updated, so
    meal items keep pointing at them; methods absent from the rows are kept.

    Returns:
        Counts of added and updated ingredients and of cooking methods
    """
    summary = {"rows": 0, "added": 0, "updated": 0, "cooking_methods": 0}
    groups = group_rows(rows)

    for (name_english, name_myanmar), variations in groups.items():
        summary["rows"] += len(variations)
        base = base_row(variations)
        values = {
            "category": base["category"].strip(),
            "subcategory": (base.get("subcategory") or "").strip() or None,
            "calories_per_100g": to_float(base["calories_per_100g_raw"]),
            "protein_g": to_float(base.get("protein_g")),
            "fat_g": to_float(base.get("fat_g")),
            "carbs_g": to_float(base.get("carbs_g")),
            "fiber_g": to_float(base.get("fiber_g")),
        }

        ingredient = Ingredient.query.filter_by(
            name_english=name_english, name_myanmar=name_myanmar, deleted_at=None
        ).first()
        if ingredient:
            for key, value in values.items():
                setattr(ingredient, key, value)
            summary["updated"] += 1
        else:
            ingredient = Ingredient(
                name_english=name_english,
                name_myanmar=name_myanmar,
                data_source=DataSource.DATABASE.value,
                confidence_score=1.0,
                verified=True,
                **values,
            )
            db.session.add(ingredient)
            summary["added"] += 1

        db.session.flush()
        methods = {m.method_name.lower(): m for m in ingredient.cooking_methods}
        for row in variations:
            method_name = row["cooking_method"].strip()
            cooked = to_float(row.get("calories_per_100g_cooked"), None)
            water = to_float(row.get("water_content_percent"), None)
            notes = (row.get("notes") or "").strip()
            existing = methods.get(method_name.lower())
            if existing is not None:
                update_cooking_method(existing, cooked, water, notes)
            else:
                methods[method_name.lower()] = add_cooking_method(ingredient, method_name, cooked, water, notes)
            summary["cooking_methods"] += 1

    db.session.commit()
    return summary
