from datetime import datetime
from htamin.extensions import db


class Ingredient(db.Model):
    __tablename__ = "ingredients"

    id = db.Column(db.Integer, primary_key=True)
    name_english = db.Column(db.String(150), nullable=False, index=True)
    name_myanmar = db.Column(db.String(150), nullable=False, index=True)
    category = db.Column(db.String(50), nullable=False, default="other")
    subcategory = db.Column(db.String(50))
    calories_per_100g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    protein_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fat_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    carbs_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fiber_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    data_source = db.Column(db.String(20), nullable=False, default="database")
    confidence_score = db.Column(db.Numeric(4, 2), nullable=False, default=1)
    verified = db.Column(db.Boolean, nullable=False, default=False)
    verified_by = db.Column(db.String(64), db.ForeignKey("users.id"))
    verified_at = db.Column(db.DateTime)
    usage_count = db.Column(db.Integer, nullable=False, default=0)
    last_used_at = db.Column(db.DateTime)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime)

    cooking_methods = db.relationship("CookingMethod", backref="ingredient", lazy="select")


class CookingMethod(db.Model):
    __tablename__ = "cooking_methods"

    id = db.Column(db.Integer, primary_key=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey("ingredients.id"), nullable=False)
    method_name = db.Column(db.String(50), nullable=False)
    calorie_multiplier = db.Column(db.Numeric(6, 2), nullable=False, default=1)
    calories_per_100g_cooked = db.Column(db.Numeric(10, 2))
    water_content_percent = db.Column(db.Numeric(5, 2))
    added_fat_g = db.Column(db.Numeric(8, 2), nullable=False, default=0)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
