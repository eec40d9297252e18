"""
TelcoGrid Backend Application
Main application factory
"""
import logging

import click
from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from prometheus_flask_exporter import PrometheusMetrics
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)
metrics = PrometheusMetrics.for_app_factory()


def _resolve_config(config_class):
    if isinstance(config_class, str):
        from telcogrid.config import config as config_map
        return config_map.get(config_class, config_map['default'])
    return config_class


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    if not app.debug and not app.testing:
        gunicorn_logger = logging.getLogger('gunicorn.error')
        if gunicorn_logger.handlers:
            app.logger.handlers = gunicorn_logger.handlers
            level = gunicorn_logger.level
    app.logger.setLevel(level)
    logging.getLogger('telcogrid').setLevel(level)


def _register_error_handlers(app):
    from telcogrid.errors import TelcoGridError, ValidationError, first_error_message

    @app.errorhandler(TelcoGridError)
    def telcogrid_error(error):
        if error.status_code >= 500:
            app.logger.error(f'Server Error: {error}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(PydanticValidationError)
    def schema_error(error):
        return jsonify({'message': first_error_message(error)}), ValidationError.status_code

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        app.logger.exception('Database error')
        return jsonify({'message': 'Internal Server Error'}), 500

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'message': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(429)
    def ratelimit_handler(e):
        return jsonify({'message': 'Rate limit exceeded'}), 429

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f'Server Error: {error}')
        return jsonify({'message': 'Internal Server Error'}), 500


def _register_commands(app):
    from telcogrid.seed import seed_operator, seed_reference_data

    @app.cli.command('seed')
    def seed_command():
        """Create tables and load the reference dataset."""
        db.create_all()
        storage = app.extensions['storage']
        password = seed_operator(storage, app.config['SEED_ADMIN_EMAIL'], app.config.get('SEED_ADMIN_PASSWORD'))
        if password:
            click.echo(f"  {app.config['SEED_ADMIN_EMAIL']} / {password}")
        if seed_reference_data(storage):
            click.echo("Reference data seeded.")
        else:
            click.echo("Provinces already present, nothing seeded.")


def _auto_seed(app):
    from telcogrid.seed import seed_operator, seed_reference_data

    with app.app_context():
        db.create_all()
        storage = app.extensions['storage']
        password = seed_operator(storage, app.config['SEED_ADMIN_EMAIL'], app.config.get('SEED_ADMIN_PASSWORD'))
        if password:
            app.logger.warning(
                "Created operator %s with generated password %s (store securely)",
                app.config['SEED_ADMIN_EMAIL'],
                password,
            )
        seed_reference_data(storage)


def create_app(config_class='default', storage_factory=None):
    """Application factory.

    ``storage_factory`` receives the SQLAlchemy session and returns the
    storage handle the routes use; it defaults to ``Storage``.
    """
    app = Flask(__name__)

    # Load configuration
    config_obj = _resolve_config(config_class)
    if hasattr(config_obj, 'validate'):
        config_obj.validate()
    app.config.from_object(config_obj)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)
    if app.config.get('METRICS_ENABLED'):
        metrics.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}}, supports_credentials=True)

    _configure_logging(app)

    from telcogrid import models  # noqa: F401  registers tables on db.metadata
    from telcogrid.storage import Storage

    app.extensions['storage'] = (storage_factory or Storage)(db.session)

    # Register blueprints
    from telcogrid.routes.auth import auth_bp
    from telcogrid.routes.bts import bts_bp
    from telcogrid.routes.keys import keys_bp
    from telcogrid.routes.msisdn import msisdn_bp
    from telcogrid.routes.regions import regions_bp
    from telcogrid.routes.stats import stats_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(keys_bp, url_prefix='/api/keys')
    app.register_blueprint(bts_bp, url_prefix='/api/bts')
    app.register_blueprint(msisdn_bp, url_prefix='/api/msisdn')
    app.register_blueprint(regions_bp, url_prefix='/api/regions')
    app.register_blueprint(stats_bp, url_prefix='/api/stats')

    # Health check endpoints
    @app.route('/health')
    def health():
        return jsonify({'status': 'healthy', 'service': 'telcogrid-backend'})

    @app.route('/api/health')
    def api_health():
        return jsonify({'status': 'healthy', 'service': 'telcogrid-backend-api'})

    _register_error_handlers(app)
    _register_commands(app)

    if app.config.get('AUTO_SEED'):
        _auto_seed(app)

    return app
