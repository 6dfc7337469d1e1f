from flask import Blueprint
from htamin.controllers.home_controller import health_check

home_bp = Blueprint("home", __name__)

@home_bp.route("/api/health", methods=["GET"])
def health():
    return health_check()
