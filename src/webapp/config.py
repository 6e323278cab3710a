"""
Configuration for the secrets web application.

Values come from the environment (a .env file is loaded by keeper.session on
import). create_app() starts from Config and applies per-app overrides, so
tests never need to touch os.environ.
"""

import os

import keeper.session


def _optional_int(name):
    value = os.getenv(name, '').strip()
    return int(value) if value else None


class Config:
    # Flask configuration
    SECRET_KEY = os.getenv('SECRET_KEY', 'your-secret-key-change-this-in-production')

    # Flask-SQLAlchemy configuration
    SQLALCHEMY_DATABASE_URI = keeper.session.connection_string
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Credential protection: 'encrypt' (Fernet, needs CREDENTIAL_KEY) or 'hash'
    CREDENTIAL_SCHEME = os.getenv('CREDENTIAL_SCHEME', 'encrypt')
    CREDENTIAL_KEY = os.getenv('CREDENTIAL_KEY')

    # Federated login (OAuth 2.0 authorization code flow)
    OAUTH_PROVIDER_NAME = os.getenv('OAUTH_PROVIDER_NAME', 'google')
    OAUTH_CLIENT_ID = os.getenv('OAUTH_CLIENT_ID')
    OAUTH_CLIENT_SECRET = os.getenv('OAUTH_CLIENT_SECRET')
    OAUTH_CALLBACK_URL = os.getenv('OAUTH_CALLBACK_URL', 'http://localhost:3000/auth/provider/callback')
    OAUTH_AUTHORIZE_URL = os.getenv('OAUTH_AUTHORIZE_URL', 'https://accounts.google.com/o/oauth2/v2/auth')
    OAUTH_TOKEN_URL = os.getenv('OAUTH_TOKEN_URL', 'https://oauth2.googleapis.com/token')
    OAUTH_USERINFO_URL = os.getenv('OAUTH_USERINFO_URL', 'https://openidconnect.googleapis.com/v1/userinfo')
    OAUTH_SCOPES = os.getenv('OAUTH_SCOPES', 'profile').split()
    OAUTH_TIMEOUT = int(os.getenv('OAUTH_TIMEOUT', '10'))

    # Seconds; None keeps sessions until logout
    SESSION_MAX_AGE = _optional_int('SESSION_MAX_AGE')

    # Logging and audit
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    AUDIT_ENABLED = os.getenv('AUDIT_ENABLED', 'true').lower() in ('true', '1', 'yes')
    AUDIT_LOG_PATH = os.getenv('AUDIT_LOG_PATH', '/var/log/keeper/model_audit.log')
