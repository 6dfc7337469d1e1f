from datetime import datetime
from htamin.extensions import db


class DishTemplate(db.Model):
    __tablename__ = "dish_templates"

    id = db.Column(db.Integer, primary_key=True)
    name_english = db.Column(db.String(150), nullable=False)
    name_myanmar = db.Column(db.String(150), nullable=False)
    category = db.Column(db.String(50))
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    typical_calories = db.Column(db.Numeric(10, 2))
    typical_protein_g = db.Column(db.Numeric(10, 2))
    typical_fat_g = db.Column(db.Numeric(10, 2))
    typical_carbs_g = db.Column(db.Numeric(10, 2))
    # [{"name_en": ..., "name_mm": ..., "portion_g": ...}]
    ingredients = db.Column(db.JSON, nullable=False, default=list)
    usage_count = db.Column(db.Integer, nullable=False, default=0)
    popularity_score = db.Column(db.Numeric(6, 2), nullable=False, default=0)
    is_public = db.Column(db.Boolean, nullable=False, default=True)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
