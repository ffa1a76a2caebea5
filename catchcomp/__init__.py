from flask import Flask

from .config import Config
from .extensions import db
from .errors import register_error_handlers


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    register_error_handlers(app)

    # Imported here so blueprints see a configured package
    from .routes import register_blueprints

    register_blueprints(app)

    return app
