from htamin import create_app
from htamin.extensions import db
from htamin.models.dish_template import DishTemplate
from htamin.services.catalog_import import import_catalog_rows

# Same columns as myanmar_food_database.csv, one row per cooking method
CATALOG_ROWS = [
    {"name_english": "Chicken Breast", "name_myanmar": "ကြက်သားရင်", "category": "meat", "calories_per_100g_raw": "165",
     "protein_g": "31", "fat_g": "3.6", "carbs_g": "0", "fiber_g": "0", "cooking_method": "Raw",
     "calories_per_100g_cooked": "165", "water_content_percent": "65"},
    {"name_english": "Chicken Breast", "name_myanmar": "ကြက်သားရင်", "category": "meat", "calories_per_100g_raw": "165",
     "protein_g": "31", "fat_g": "3.6", "carbs_g": "0", "fiber_g": "0", "cooking_method": "Curry",
     "calories_per_100g_cooked": "215", "water_content_percent": "58", "notes": "Cooked in oil with onion paste"},
    {"name_english": "White Rice", "name_myanmar": "ထမင်းဖြူ", "category": "grain", "calories_per_100g_raw": "365",
     "protein_g": "7.1", "fat_g": "0.7", "carbs_g": "80", "fiber_g": "1.3", "cooking_method": "Raw",
     "calories_per_100g_cooked": "365", "water_content_percent": "12"},
    {"name_english": "White Rice", "name_myanmar": "ထမင်းဖြူ", "category": "grain", "calories_per_100g_raw": "365",
     "protein_g": "7.1", "fat_g": "0.7", "carbs_g": "80", "fiber_g": "1.3", "cooking_method": "Boiled",
     "calories_per_100g_cooked": "130", "water_content_percent": "68"},
    {"name_english": "Rice Noodles", "name_myanmar": "မုန့်ဖတ်", "category": "grain", "calories_per_100g_raw": "364",
     "protein_g": "6", "fat_g": "0.6", "carbs_g": "83", "fiber_g": "1.6", "cooking_method": "Boiled",
     "calories_per_100g_cooked": "109", "water_content_percent": "72"},
    {"name_english": "Peanuts", "name_myanmar": "မြေပဲ", "category": "legume", "calories_per_100g_raw": "567",
     "protein_g": "26", "fat_g": "49", "carbs_g": "16", "fiber_g": "8.5", "cooking_method": "Raw",
     "calories_per_100g_cooked": "567", "water_content_percent": "6"},
    {"name_english": "Peanuts", "name_myanmar": "မြေပဲ", "category": "legume", "calories_per_100g_raw": "567",
     "protein_g": "26", "fat_g": "49", "carbs_g": "16", "fiber_g": "8.5", "cooking_method": "Fried_salted",
     "calories_per_100g_cooked": "599", "water_content_percent": "2"},
    {"name_english": "Tomato", "name_myanmar": "ခရမ်းချဉ်သီး", "category": "vegetable", "calories_per_100g_raw": "18",
     "protein_g": "0.9", "fat_g": "0.2", "carbs_g": "3.9", "fiber_g": "1.2", "cooking_method": "Raw",
     "calories_per_100g_cooked": "18", "water_content_percent": "95"},
]

DISH_TEMPLATES = [
    {
        "name_english": "Chicken Curry with Rice", "name_myanmar": "ကြက်သား ဟင်း နှင့် ထမင်း", "category": "curry",
        "description": "Traditional Myanmar chicken curry served with white rice",
        "typical_calories": 650, "typical_protein_g": 45, "typical_fat_g": 25, "typical_carbs_g": 65,
        "ingredients": [
            {"name_english": "Chicken Breast", "name_myanmar": "ကြက်သားရင်", "cooking_method": "Curry", "portion_grams": 150},
            {"name_english": "White Rice", "name_myanmar": "ထမင်းဖြူ", "cooking_method": "Boiled", "portion_grams": 200},
        ],
    },
    {
        "name_english": "Mohinga", "name_myanmar": "မုန့်ဟင်းခါး", "category": "noodles",
        "description": "Rice noodles in fish soup",
        "typical_calories": 450, "typical_protein_g": 25, "typical_fat_g": 18, "typical_carbs_g": 55,
        "ingredients": [
            {"name_english": "Rice Noodles", "name_myanmar": "မုန့်ဖတ်", "cooking_method": "Boiled", "portion_grams": 200},
        ],
    },
    {
        "name_english": "Tea Leaf Salad", "name_myanmar": "လက်ဖက်သုတ်", "category": "salad",
        "description": "Pickled tea leaf salad",
        "typical_calories": 280, "typical_protein_g": 12, "typical_fat_g": 18, "typical_carbs_g": 22,
        "ingredients": [
            {"name_english": "Peanuts", "name_myanmar": "မြေပဲ", "cooking_method": "Fried_salted", "portion_grams": 30},
            {"name_english": "Tomato", "name_myanmar": "ခရမ်းချဉ်သီး", "cooking_method": "Raw", "portion_grams": 100},
        ],
    },
]

app = create_app()
with app.app_context():
    db.create_all()

    summary = import_catalog_rows(CATALOG_ROWS)
    print(f"Ingredients added: {summary['added']}, updated: {summary['updated']}")

    for item in DISH_TEMPLATES:
        existing = DishTemplate.query.filter_by(name_english=item["name_english"]).first()
        if not existing:
            db.session.add(DishTemplate(is_public=True, is_verified=True, **item))
            print(f"Added template: {item['name_english']}")

    db.session.commit()
    print("Seeding complete.")
