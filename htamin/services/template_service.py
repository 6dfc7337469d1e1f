from typing import Any, Dict, List, Optional

from htamin.extensions import db
from htamin.models.dish_template import DishTemplate

# Upper bound on templates offered to the model in one matching prompt
MATCH_CANDIDATES = 50


def _public():
    return DishTemplate.query.filter(DishTemplate.is_public.is_(True))


def list_templates(category: Optional[str] = None, limit: int = 20) -> List[DishTemplate]:
    query = _public()
    if category:
        query = query.filter(DishTemplate.category == category)
    return query.order_by(DishTemplate.popularity_score.desc(), DishTemplate.id).limit(limit).all()


def get_template(template_id: Any) -> Optional[DishTemplate]:
    return db.session.get(DishTemplate, template_id)


def match_candidates() -> List[Dict[str, Any]]:
    return [
        {"id": t.id, "name_english": t.name_english, "name_myanmar": t.name_myanmar, "category": t.category}
        for t in list_templates(limit=MATCH_CANDIDATES)
    ]


def serialize_template(template: DishTemplate) -> Dict[str, Any]:
    def num(value):
        return float(value) if value is not None else None

    return {
        "id": template.id,
        "name_english": template.name_english,
        "name_myanmar": template.name_myanmar,
        "category": template.category,
        "description": template.description,
        "image_url": template.image_url,
        "typical_calories": num(template.typical_calories),
        "typical_protein_g": num(template.typical_protein_g),
        "typical_fat_g": num(template.typical_fat_g),
        "typical_carbs_g": num(template.typical_carbs_g),
        "ingredients": template.ingredients or [],
        "usage_count": template.usage_count,
        "popularity_score": float(template.popularity_score or 0),
        "is_verified": template.is_verified,
    }
