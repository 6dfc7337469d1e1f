from flask import Blueprint
from htamin.controllers.meal_controller import create_meal_handler, list_meals_handler
from htamin.controllers.ai_controller import meal_insights_handler

meal_bp = Blueprint("meals", __name__, url_prefix="/api/meals")

@meal_bp.route("", methods=["POST"])
def create_meal():
    return create_meal_handler()

@meal_bp.route("", methods=["GET"])
def list_meals():
    return list_meals_handler()

@meal_bp.route("/insights", methods=["GET"])
def meal_insights():
    return meal_insights_handler()
