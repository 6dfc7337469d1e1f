from flask import Blueprint
from htamin.controllers.template_controller import list_templates_handler

template_bp = Blueprint("templates", __name__, url_prefix="/api/templates")

@template_bp.route("", methods=["GET"])
def list_templates():
    return list_templates_handler()
