#!/usr/bin/env python3
import logging

from flask import Flask, render_template
from flask_login import current_user

from keeper.security.credentials import get_credential_scheme
from webapp.config import Config
from webapp.extensions import db, login_manager
from webapp.auth import sessions
from webapp.auth.blueprint import bp as auth_bp
from webapp.secrets.blueprint import bp as secrets_bp
from webapp.clients.oauth import OAuthProviderClient
from webapp.audit import init_audit
from webapp.cli import register_commands
from webapp.errors import register_error_handlers
from webapp.utils.request_log import configure_logging

logger = logging.getLogger(__name__)


def create_app(config_overrides: dict = None):
    """
    Application factory.

    Args:
        config_overrides: Values applied on top of webapp.config.Config
                          (tests use this to point at SQLite)
    """
    app = Flask(__name__)

    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app)

    # Production-ready connection pool configuration
    engine_options = {
        'pool_pre_ping': True,     # Verify connections before using
        'pool_recycle': 3600,      # Recycle connections after 1 hour
        'echo': False,             # Set to True for SQL debugging
    }

    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    if not database_uri.startswith('sqlite'):
        engine_options['pool_size'] = 10       # Number of connections to maintain
        engine_options['max_overflow'] = 20    # Additional connections when pool is exhausted

        import keeper.session
        if keeper.session.require_ssl():
            engine_options['connect_args'] = {'ssl': {'ssl_disabled': False}}

    app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', engine_options)

    # Initialize db with app
    db.init_app(app)

    # Credential scheme and provider client, shared by the auth routes
    app.extensions['credential_scheme'] = get_credential_scheme(
        app.config['CREDENTIAL_SCHEME'], key=app.config.get('CREDENTIAL_KEY')
    )
    app.extensions['oauth_client'] = OAuthProviderClient.from_config(app.config)
    if app.extensions['oauth_client'] is None:
        logger.info("No OAuth client configured; federated login disabled")

    # Initialize Flask-Login
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.user_loader(sessions.load_user)

    if app.config.get('AUDIT_ENABLED'):
        init_audit(app)

    # Register teardown handler for automatic session cleanup
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        db.session.remove()

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(secrets_bp)

    register_error_handlers(app)
    register_commands(app)

    # Landing page
    @app.route('/')
    def index():
        return render_template('home.html', user=current_user)

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, port=3000)
