import logging

from flask import Flask
from flask_cors import CORS

from .catalog import EXTENSION_KEY, build_catalog
from .config import Config
from .extensions import db
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(config_class: type[Config] = Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)
    CORS(app, origins=app.config["CORS_ORIGINS"])

    db.init_app(app)
    with app.app_context():
        db.create_all()

    app.extensions[EXTENSION_KEY] = build_catalog(db.session)

    register_blueprints(app)
    register_commands(app)

    @app.get("/health")
    def health_check() -> tuple[dict[str, str], int]:
        return {"status": "ok"}, 200

    logger.info("product catalog ready on %s", app.config["SQLALCHEMY_DATABASE_URI"])
    return app


def register_blueprints(app: Flask) -> None:
    from .api.v1.product_routes import product_bp

    app.register_blueprint(product_bp, url_prefix="/api/v1/products")


def register_commands(app: Flask) -> None:
    from .cli import init_db_command

    app.cli.add_command(init_db_command)
