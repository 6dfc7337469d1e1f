from flask import Blueprint
from htamin.controllers.ai_controller import extract_ingredients_handler, match_template_handler

ai_bp = Blueprint("ai", __name__, url_prefix="/api/ai")

@ai_bp.route("/extract-ingredients", methods=["POST"])
def extract_ingredients():
    return extract_ingredients_handler()

@ai_bp.route("/match-template", methods=["POST"])
def match_template():
    return match_template_handler()
