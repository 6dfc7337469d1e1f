from .home_routes import home_bp
from .ai_routes import ai_bp
from .meal_routes import meal_bp
from .ingredient_routes import bp as ingredient_bp
from .template_routes import template_bp
from .admin_routes import admin_bp

def register_routes(app):
    app.register_blueprint(home_bp)
    app.register_blueprint(ai_bp)
    app.register_blueprint(meal_bp)
    app.register_blueprint(ingredient_bp)
    app.register_blueprint(template_bp)
    app.register_blueprint(admin_bp)
