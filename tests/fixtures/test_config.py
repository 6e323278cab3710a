"""
Test Configuration

Provides Flask config overrides and engine/session factories for testing
against SQLite, so the suite needs no database server.
"""

from sqlalchemy.orm import sessionmaker

from keeper.base import Base
from keeper.session import create_keeper_engine


CREDENTIAL_KEY = 'test-credential-key'

OAUTH_SETTINGS = {
    'OAUTH_PROVIDER_NAME': 'testprovider',
    'OAUTH_CLIENT_ID': 'test-client-id',
    'OAUTH_CLIENT_SECRET': 'test-client-secret',
    'OAUTH_CALLBACK_URL': 'http://localhost/auth/provider/callback',
    'OAUTH_AUTHORIZE_URL': 'https://provider.example/authorize',
    'OAUTH_TOKEN_URL': 'https://provider.example/token',
    'OAUTH_USERINFO_URL': 'https://provider.example/userinfo',
    'OAUTH_SCOPES': ['profile'],
    'OAUTH_TIMEOUT': 5,
}


def make_app_config(**overrides):
    """
    Build create_app() overrides for a test app.

    Uses an in-memory SQLite database, the encryption scheme and the fake
    provider endpoints above.
    """
    config = {
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'CREDENTIAL_SCHEME': 'encrypt',
        'CREDENTIAL_KEY': CREDENTIAL_KEY,
        'SESSION_MAX_AGE': None,
        'AUDIT_ENABLED': False,
        'LOG_LEVEL': 'DEBUG',
    }
    config.update(OAUTH_SETTINGS)
    config.update(overrides)
    return config


def create_test_engine(db_path):
    """
    Create SQLAlchemy engine on a SQLite file and create all tables.

    Args:
        db_path: Path of the SQLite database file

    Returns:
        SQLAlchemy Engine instance
    """
    engine, _ = create_keeper_engine(f'sqlite:///{db_path}')
    Base.metadata.create_all(engine)
    return engine


def create_test_session_factory(engine):
    """
    Create a session factory for tests.

    Args:
        engine: Engine from create_test_engine()

    Returns:
        sessionmaker instance
    """
    return sessionmaker(bind=engine, autoflush=False)
