import logging

from flask import Flask, jsonify

from .config import Config
from .extensions import db, migrate, csrf
from . import models  # noqa: F401  registers tables and rating triggers


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    from .views.api import api_bp
    csrf.exempt(api_bp)
    app.register_blueprint(api_bp, url_prefix='/api')

    from .cli_commands import register_commands
    register_commands(app)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify(ok=False, error='not found'), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify(ok=False, error='method not allowed'), 405

    with app.app_context():
        db.create_all()
    return app
