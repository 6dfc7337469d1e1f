from flask import Blueprint
from htamin.controllers.ingredient_controller import search_ingredients_handler, contribute_ingredient_handler
from htamin.utils.auth import require_auth

bp = Blueprint("ingredients", __name__, url_prefix="/api")

@bp.route("/search/ingredients", methods=["GET"])
def search():
    return search_ingredients_handler()

@bp.route("/ingredients", methods=["POST"])
@require_auth
def contribute():
    return contribute_ingredient_handler()
