from datetime import datetime

from flask import current_app

from htamin.schemas.meal_schema import CreateMealSchema
from htamin.services.meal_service import MealSaveError, save_meal, list_meals
from htamin.utils.auth import session_user_id
from htamin.utils.http import ok, error, json_body, validate_schema, arg_str, parse_iso_datetime, parse_iso_date


def create_meal_handler():
    data, errors = validate_schema(CreateMealSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid meal payload", 400, details=errors)

    user_id = data.get("user_id") or session_user_id()
    if not user_id:
        return error("VALIDATION_ERROR", "user_id is required", 400)

    eaten_at = None
    if data.get("eaten_at"):
        eaten_at = parse_iso_datetime(data["eaten_at"])
        if eaten_at is None:
            return error("VALIDATION_ERROR", "eaten_at must be an ISO 8601 timestamp", 400)

    try:
        meal = save_meal(
            user_id,
            data["ingredients"],
            meal_name=data.get("meal_name"),
            meal_type=data.get("meal_type"),
            eaten_at=eaten_at,
            notes=data.get("notes"),
        )
    except ValueError as e:
        code, _, message = str(e).partition(": ")
        if code == "USER_NOT_FOUND":
            return error("NOT_FOUND", "User not found", 404)
        if code == "INGREDIENT_NOT_FOUND":
            return error(code, message, 400)
        return error("VALIDATION_ERROR", message or code, 400)
    except MealSaveError as e:
        current_app.logger.error(f"Meal save failed: {e}")
        return error("SAVE_FAILED", "Failed to save meal", 500, details=str(e))

    return ok({"success": True, "meal": meal}, 201)


def list_meals_handler():
    user_id = arg_str("user_id") or session_user_id()
    if not user_id:
        return error("VALIDATION_ERROR", "user_id is required", 400)

    day_param = arg_str("date")
    day = parse_iso_date(day_param) if day_param else datetime.utcnow().date()
    if day is None:
        return error("VALIDATION_ERROR", "date must be YYYY-MM-DD", 400)

    return ok({"meals": list_meals(user_id, day)})
