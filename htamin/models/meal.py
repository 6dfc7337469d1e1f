from datetime import datetime
from htamin.extensions import db


class Meal(db.Model):
    __tablename__ = "meals"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey("users.id"), nullable=False, index=True)
    meal_type = db.Column(db.String(20))
    meal_name = db.Column(db.String(200))
    notes = db.Column(db.Text)
    eaten_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    total_calories = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_protein_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_fat_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_carbs_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_fiber_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    ai_generated = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime)

    items = db.relationship("MealItem", backref="meal", lazy="select", order_by="MealItem.id")


class MealItem(db.Model):
    __tablename__ = "meal_items"

    id = db.Column(db.Integer, primary_key=True)
    meal_id = db.Column(db.Integer, db.ForeignKey("meals.id"), nullable=False, index=True)
    # Null for AI-estimated items without a catalog row
    ingredient_id = db.Column(db.Integer, db.ForeignKey("ingredients.id"))
    cooking_method_id = db.Column(db.Integer, db.ForeignKey("cooking_methods.id"))
    custom_name = db.Column(db.String(150))
    portion_grams = db.Column(db.Numeric(8, 2), nullable=False)
    calories = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    protein_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fat_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    carbs_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fiber_g = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    confidence_level = db.Column(db.String(20), nullable=False)
    ai_suggested = db.Column(db.Boolean, nullable=False, default=True)
    user_confirmed = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    ingredient = db.relationship("Ingredient")
