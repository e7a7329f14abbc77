import logging

import click
from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError

from gateflow.config import load_config_class
from gateflow.controllers.admin import admin_bp
from gateflow.controllers.analytics import analytics_bp
from gateflow.controllers.auth import auth_bp, init_jwt
from gateflow.controllers.common import credential_issuer, principal_store
from gateflow.controllers.entry_logs import entry_logs_bp
from gateflow.controllers.incidents import incidents_bp
from gateflow.controllers.sos import sos_bp
from gateflow.controllers.visitor_pass import visitor_pass_bp
from gateflow.db.db import init_db, db
from gateflow.db.initializers.account_initializer import initialize_default_accounts
from gateflow.services.errors import InternalFailure, ServiceError
from gateflow.utils.broadcaster import socketio

# Schema changes go through Flask-Migrate:
# 1 flask --app gateflow.manage db migrate -m "your commit message"
# 2 flask --app gateflow.manage db upgrade

logger = logging.getLogger(__name__)


def register_error_handlers(app):

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception("Database failure while handling request")
        failure = InternalFailure()
        return jsonify(failure.to_dict()), failure.status_code


def register_commands(app):

    @app.cli.command('seed-accounts')
    def seed_accounts():
        """Create the default admin and guard accounts."""
        created = initialize_default_accounts(principal_store(), credential_issuer().hash_password)
        click.echo(f"Seeded {len(created)} account(s)")

    @app.cli.command('create-tables')
    def create_tables():
        """Create all tables without migrations (local development)."""
        db.create_all()
        click.echo("Tables created")


def create_app(config_class=None):
    app = Flask(__name__)
    app.config.from_object(config_class or load_config_class())

    logging.basicConfig(level=getattr(logging, app.config['LOG_LEVEL'].upper(), logging.INFO))

    CORS(app, origins=app.config['CORS_ORIGINS'])

    app.register_blueprint(auth_bp)
    app.register_blueprint(entry_logs_bp)
    app.register_blueprint(visitor_pass_bp)
    app.register_blueprint(sos_bp)
    app.register_blueprint(incidents_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(analytics_bp)

    init_jwt(app)
    init_db(app)
    register_error_handlers(app)
    register_commands(app)

    origins = app.config['CORS_ORIGINS']
    socketio.init_app(
        app,
        cors_allowed_origins='*' if origins == ['*'] else origins,
        async_mode=app.config['SOCKETIO_ASYNC_MODE']
    )

    @app.route("/")
    def index():
        return "Backend is alive!"

    return app
