from datetime import datetime

import pytest

from htamin import create_app
from htamin.extensions import db
from htamin.models import User, Ingredient, CookingMethod, DishTemplate
from htamin.services.gemini_client import ExtractionError, ModelCall
from htamin.utils.auth import create_token

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "SQLALCHEMY_TRACK_MODIFICATIONS": False,
    "SECRET_KEY": "test-secret-key-long-enough-for-hs256",
    "AUTH_JWT_SECRET": None,
    "AUTH_JWT_AUDIENCE": None,
    "GEMINI_API_KEY": None,
    # Quota tests install their own tracker
    "GEMINI_RPM_LIMIT": 1000,
    "GEMINI_RPD_LIMIT": 100000,
    "ENRICHMENT_MAX_WORKERS": 4,
}

ADMIN_ID = "admin-1"
USER_ID = "user-1"

AI_ESTIMATE = {
    "calories_per_100g": 60.0,
    "protein_g": 1.2,
    "fat_g": 0.4,
    "carbs_g": 13.0,
    "fiber_g": 3.0,
    "confidence": 0.8,
    "source": "ai",
}


class FakeGemini:
    """Stands in for GeminiClient; reports one ModelCall per method call."""

    model_name = "fake-gemini"

    def __init__(self):
        self.fail_extraction = False

    def _report(self, on_call, endpoint, success=True):
        if on_call is not None:
            on_call(ModelCall(
                endpoint=endpoint,
                success=success,
                model_name=self.model_name,
                request_tokens=10,
                response_tokens=20,
                total_tokens=30,
                error_message=None if success else "boom",
                response_time_ms=5,
            ))

    def extract_ingredients(self, dish_text, language="mm", on_call=None):
        if self.fail_extraction:
            self._report(on_call, "extract-ingredients", success=False)
            raise ExtractionError("No valid JSON found in response")
        self._report(on_call, "extract-ingredients")
        return {
            "dish_name": "ကြက်သားဟင်း",
            "cooking_method": "curry",
            "ingredients": [
                {"name_mm": "ကြက်သား", "name_en": "Chicken", "estimated_portion_g": 150.0,
                 "confidence": 0.95, "category": "meat"},
                {"name_mm": "နဂါးမောက်သီး", "name_en": "Dragon Fruit", "estimated_portion_g": 80.0,
                 "confidence": 0.6, "category": "fruit"},
            ],
        }

    def estimate_nutrition(self, ingredient_name, category=None, on_call=None):
        self._report(on_call, "estimate-nutrition")
        return dict(AI_ESTIMATE)

    def match_dish_template(self, user_input, templates, on_call=None):
        self._report(on_call, "match-template")
        if not templates:
            return None
        return {"template_id": templates[0]["id"], "confidence": 0.9}

    def generate_meal_insights(self, daily, on_call=None):
        self._report(on_call, "meal-insights")
        return f"{daily['total_calories']} kcal today"


@pytest.fixture(scope="module")
def app():
    app = create_app(TEST_CONFIG)
    app.extensions["gemini"] = FakeGemini()
    with app.app_context():
        db.create_all()

        db.session.add(User(id=ADMIN_ID, email="admin@example.com", full_name="Admin", is_admin=True))
        db.session.add(User(id=USER_ID, email="user@example.com", full_name="Ko Aung", daily_calorie_target=1800))

        chicken = Ingredient(name_english="Chicken Breast", name_myanmar="ကြက်သားရင်", category="meat",
                             calories_per_100g=165, protein_g=31, fat_g=3.6, carbs_g=0, fiber_g=0,
                             data_source="database", verified=True, usage_count=5)
        rice = Ingredient(name_english="White Rice", name_myanmar="ထမင်းဖြူ", category="grain",
                          calories_per_100g=130, protein_g=2.7, fat_g=0.3, carbs_g=28, fiber_g=0.4,
                          data_source="database", verified=True, usage_count=10)
        feet = Ingredient(name_english="Chicken Feet", name_myanmar="ကြက်ခြေထောက်", category="meat",
                          calories_per_100g=215, protein_g=19, fat_g=15, carbs_g=0.2, fiber_g=0,
                          data_source="user", confidence_score=0.5, verified=False)
        pork = Ingredient(name_english="Pork Belly", name_myanmar="ဝက်သားဗိုက်သား", category="meat",
                          calories_per_100g=518, protein_g=9.3, fat_g=53, carbs_g=0, fiber_g=0,
                          data_source="database", verified=True, deleted_at=datetime(2026, 1, 1))
        db.session.add_all([chicken, rice, feet, pork])
        db.session.flush()

        db.session.add_all([
            CookingMethod(ingredient=chicken, method_name="Raw", calorie_multiplier=1.0,
                          calories_per_100g_cooked=165),
            CookingMethod(ingredient=chicken, method_name="Curry", calorie_multiplier=1.3,
                          calories_per_100g_cooked=215),
            CookingMethod(ingredient=rice, method_name="Fried", calorie_multiplier=1.5,
                          calories_per_100g_cooked=195),
        ])

        db.session.add_all([
            DishTemplate(name_english="Mohinga", name_myanmar="မုန့်ဟင်းခါး", category="noodles",
                         typical_calories=450, popularity_score=9, is_public=True, is_verified=True,
                         ingredients=[{"name_english": "Rice Noodles", "portion_grams": 200}]),
            DishTemplate(name_english="Tea Leaf Salad", name_myanmar="လက်ဖက်သုတ်", category="salad",
                         typical_calories=280, popularity_score=7, is_public=True, is_verified=True),
            DishTemplate(name_english="Family Recipe", name_myanmar="အိမ်ချက်", category="curry",
                         popularity_score=10, is_public=False),
        ])
        db.session.commit()

    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_headers(app):
    def make(user_id):
        with app.app_context():
            return {"Authorization": f"Bearer {create_token(user_id)}"}
    return make


@pytest.fixture()
def fake_gemini(app):
    return app.extensions["gemini"]
