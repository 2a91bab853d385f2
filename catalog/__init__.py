from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from config import config
from sqlalchemy import MetaData
import logging

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

naming_convention = {
    "ix": 'ix_%(column_0_label)s',
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

db = SQLAlchemy(metadata=MetaData(naming_convention=naming_convention))
migrate = Migrate()


def create_app(config_name='default'):
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.json.ensure_ascii = False

    db.init_app(app)
    migrate.init_app(app, db)

    from catalog.routes.products import products_bp
    from catalog.routes.categories import categories_bp
    from catalog.routes.import_export import import_export_bp
    from catalog.routes.error_handlers import errors_bp

    app.register_blueprint(products_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(import_export_bp)
    app.register_blueprint(errors_bp)

    with app.app_context():
        # Import models so create_all sees every table
        from catalog import models  # noqa: F401
        try:
            db.create_all()
        except Exception as e:
            logging.error(f"Database initialization failed: {e}")

    return app
