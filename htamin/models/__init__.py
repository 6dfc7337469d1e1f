from .user import User
from .ingredient import Ingredient, CookingMethod
from .meal import Meal, MealItem
from .api_usage import ApiUsage
from .dish_template import DishTemplate

__all__ = ["User", "Ingredient", "CookingMethod", "Meal", "MealItem", "ApiUsage", "DishTemplate"]
