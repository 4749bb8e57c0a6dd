# --- storefront/__init__.py ---
import logging

from flask import Flask, jsonify

from .config import Config
from .errors import register_error_handlers
from .extensions import cors, init_services


def create_app(test_config=None, mail_transport=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.from_mapping(test_config)
    Config.init_app(app)

    # app.logger is the "storefront" logger, so service module loggers propagate to its handler
    if not app.debug and not app.testing:
        app.logger.setLevel(logging.INFO)

    # Init extensions
    cors.init_app(app, resources={r"/*": {"origins": "*"}})
    services = init_services(app, mail_transport=mail_transport)
    register_error_handlers(app)

    # Register blueprints
    from .product import bp as product_bp; app.register_blueprint(product_bp)
    from .category import bp as category_bp; app.register_blueprint(category_bp)
    from .order import bp as order_bp; app.register_blueprint(order_bp)
    from .admin import bp as admin_bp; app.register_blueprint(admin_bp)

    from .cli import register_cli
    register_cli(app)

    @app.get("/health")
    def health():
        return jsonify(ok=True, msg="API running")

    services.mailer.report_configuration()
    if app.config["MAIL_VERIFY_ON_STARTUP"]:
        services.mailer.verify_in_background()

    return app
