# backend/dishooom/__init__.py
import logging
import os

from flask import Flask, request

from .config import Config
from .extensions import stores


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    if not app.config.get("SETTINGS_PATH"):
        app.config["SETTINGS_PATH"] = os.path.join(app.instance_path, "settings.json")

    logging.getLogger("dishooom").setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    # Build the entity stores (and load seed data) once per application
    stores.init_app(app)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.products import products_bp
    from .routes.customers import customers_bp
    from .routes.sales_orders import sales_orders_bp
    from .routes.invoices import invoices_bp
    from .routes.expenses import expenses_bp
    from .routes.reports import reports_bp
    from .routes.dashboard import dashboard_bp
    from .routes.settings import settings_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(sales_orders_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(settings_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
