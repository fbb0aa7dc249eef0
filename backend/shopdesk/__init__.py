# backend/shopdesk/__init__.py
from __future__ import annotations

from flask import Flask, request

from .config import Config
from .extensions import shop_store, init_assistant, init_document_parser
from .store import ShopState


def create_app(
    initial_state: ShopState | None = None,
    config: dict | None = None,
    document_parser=None,
    assistant=None,
) -> Flask:
    """
    Build one shop application.

    initial_state replaces the built-in mock data (tests pass fixtures
    here). config entries override Config. document_parser and assistant
    replace the Gemini clients built from config.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    if initial_state is None:
        if app.config["SHOPDESK_SEED_MOCK_DATA"]:
            from .seed import build_initial_state
            initial_state = build_initial_state()
        else:
            initial_state = ShopState()

    # Initialize extensions
    shop_store.init_app(app, initial_state)
    init_document_parser(app, document_parser)
    init_assistant(app, assistant)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.employees import employees_bp
    from .routes.products import products_bp
    from .routes.customers import customers_bp
    from .routes.suppliers import suppliers_bp
    from .routes.sales import sales_bp
    from .routes.repairs import repairs_bp
    from .routes.purchases import purchases_bp
    from .routes.vat_invoices import vat_invoices_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(employees_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(suppliers_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(repairs_bp)
    app.register_blueprint(purchases_bp)
    app.register_blueprint(vat_invoices_bp)
    app.register_blueprint(reports_bp)

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
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
