from flask import Blueprint
from htamin.utils.auth import require_admin
from htamin.controllers.admin_user_controller import list_users_handler, set_admin_flag_handler
from htamin.controllers.dashboard_controller import get_stats_handler, get_usage_handler
from htamin.controllers.ingredient_controller import (
    admin_list_ingredients_handler,
    admin_create_ingredient_handler,
    admin_verify_ingredient_handler,
    admin_delete_ingredient_handler,
)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

@admin_bp.route("/ingredients", methods=["GET"])
@require_admin
def list_ingredients(admin):
    return admin_list_ingredients_handler(admin)

@admin_bp.route("/ingredients", methods=["POST"])
@require_admin
def create_ingredient(admin):
    return admin_create_ingredient_handler(admin)

@admin_bp.route("/ingredients/<int:id>/verify", methods=["PATCH"])
@require_admin
def verify_ingredient(id, admin):
    return admin_verify_ingredient_handler(id, admin)

@admin_bp.route("/ingredients/<int:id>", methods=["DELETE"])
@require_admin
def delete_ingredient(id, admin):
    return admin_delete_ingredient_handler(id, admin)

@admin_bp.route("/users", methods=["GET"])
@require_admin
def list_users(admin):
    return list_users_handler(admin)

@admin_bp.route("/users/<id>/admin", methods=["PATCH"])
@require_admin
def set_admin_flag(id, admin):
    return set_admin_flag_handler(id, admin)

@admin_bp.route("/stats", methods=["GET"])
@require_admin
def stats(admin):
    return get_stats_handler(admin)

@admin_bp.route("/usage", methods=["GET"])
@require_admin
def usage(admin):
    return get_usage_handler(admin)
