# backend/ebucks/__init__.py
from flask import Flask, request

from .config import Config
from .extensions import db, migrate
from .money import format_cents


def create_app(config_object=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Print templates render amounts from cents
    app.add_template_filter(format_cents, "money")

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.timekeeping import timekeeping_bp
    from .routes.inventory import inventory_bp
    from .routes.sales import sales_bp
    from .routes.transfers import transfers_bp
    from .routes.payroll import payroll_bp
    from .routes.vouchers import vouchers_bp
    from .routes.printers import printers_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(timekeeping_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(transfers_bp)
    app.register_blueprint(payroll_bp)
    app.register_blueprint(vouchers_bp)
    app.register_blueprint(printers_bp)
    app.register_blueprint(reports_bp)

    allowed_origins = set(app.config.get("CORS_ORIGINS", []))

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
