import logging

from flask import Flask
from htamin.extensions import db, migrate, cors
from htamin.routes import register_routes
from htamin.services.gemini_client import GeminiClient
from htamin.services.usage_tracker import UsageTracker


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object("config.Config")
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))

    # Initialize database and the `flask db` migration commands
    db.init_app(app)
    migrate.init_app(app, db)

    cors.init_app(app,
                  origins=app.config.get("CORS_ORIGINS"),
                  supports_credentials=True,
                  allow_headers=["Content-Type", "Authorization"],
                  methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
                  expose_headers=["Content-Type", "Authorization"])

    # Long-lived handles, one per app, looked up by controllers
    app.extensions["gemini"] = GeminiClient(
        api_key=app.config.get("GEMINI_API_KEY"),
        model_name=app.config.get("GEMINI_MODEL"),
        timeout_ms=app.config.get("GEMINI_TIMEOUT_MS"),
    )
    app.extensions["usage_tracker"] = UsageTracker(
        rpm_limit=app.config.get("GEMINI_RPM_LIMIT", 15),
        rpd_limit=app.config.get("GEMINI_RPD_LIMIT", 1500),
        tier=app.config.get("GEMINI_TIER", "Free"),
        model_name=app.config.get("GEMINI_MODEL"),
    )

    register_routes(app)

    return app
