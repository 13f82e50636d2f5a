"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints and the JSON
error handlers.
"""
import logging
import uuid

import click
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from leadwell.errors import (
    ConflictError, ForeignKeyViolation, NotFoundError, RequestValidationError,
)

logger = logging.getLogger('leadwell')


def create_app(storage=None):
    """
    Create and configure the Flask application.

    `storage` overrides the configured backend (tests pass one in).
    """
    from leadwell import config
    from leadwell.logging_config import configure_logging
    from leadwell.storage import build_storage

    configure_logging()
    config.validate_config()

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    app.config['STORAGE_BACKEND'] = config.STORAGE_BACKEND if storage is None else type(storage).__name__
    app.extensions['storage'] = storage if storage is not None else build_storage(config.STORAGE_BACKEND)

    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid.uuid4().hex[:12]

    @app.after_request
    def echo_request_id(response):
        response.headers['X-Request-ID'] = g.get('request_id', '-')
        return response

    _register_error_handlers(app)

    # Register blueprints
    from leadwell.routes.leads import bp as leads_bp
    from leadwell.routes.calls import bp as calls_bp
    from leadwell.routes.form_submissions import bp as form_submissions_bp
    from leadwell.routes.insights import bp as insights_bp
    from leadwell.routes.stats import bp as stats_bp
    from leadwell.routes.catalog import bp as catalog_bp
    from leadwell.routes.health import bp as health_bp

    app.register_blueprint(leads_bp)
    app.register_blueprint(calls_bp)
    app.register_blueprint(form_submissions_bp)
    app.register_blueprint(insights_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(health_bp)

    # Initialize circuit breakers for external API services
    from leadwell.extensions import redis_client
    from leadwell.services.circuit_breaker import init_breakers
    init_breakers(redis_client)

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables (local SQLite). Production schemas are managed by Alembic."""
        from leadwell.database import init_db
        init_db()
        click.echo('Database tables created.')

    return app


def _register_error_handlers(app):

    @app.errorhandler(RequestValidationError)
    def handle_validation(e):
        return jsonify({'message': e.message, 'errors': e.errors}), 400

    @app.errorhandler(ForeignKeyViolation)
    def handle_foreign_key(e):
        return jsonify({'message': 'Referenced record does not exist', 'errors': [{'field': '__root__', 'message': str(e)}]}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({'message': f"{e.entity} not found"}), 404

    @app.errorhandler(ConflictError)
    def handle_conflict(e):
        return jsonify({'message': str(e)}), 409

    @app.errorhandler(HTTPException)
    def handle_http(e):
        return jsonify({'message': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({'message': 'Internal server error'}), 500
