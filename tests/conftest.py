#-------------------------------------------------------------------------bh-
# pytest configuration and fixtures for the secrets keeper tests
#-------------------------------------------------------------------------eh-

import pytest
import sys
from pathlib import Path

# Add project src and tests to path for imports
PROJ_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJ_ROOT / 'src'))
sys.path.insert(0, str(PROJ_ROOT / 'tests'))

from fixtures.test_config import (
    make_app_config,
    create_test_engine,
    create_test_session_factory,
)
from fixtures.client_helpers import login


# ============================================================================
# Store-level fixtures (plain SQLAlchemy on a SQLite file)
# ============================================================================

@pytest.fixture
def engine(tmp_path):
    """SQLite file engine with all keeper tables created."""
    engine = create_test_engine(tmp_path / 'keeper.db')
    yield engine
    engine.dispose()


@pytest.fixture
def SessionFactory(engine):
    """Create a session factory bound to the test engine."""
    return create_test_session_factory(engine)


@pytest.fixture
def session(SessionFactory):
    """
    Provide a test session.

    Management functions commit, so each test gets its own database file
    rather than a rolled-back transaction.
    """
    session = SessionFactory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def encrypt_scheme():
    from keeper.security.credentials import get_credential_scheme
    return get_credential_scheme('encrypt', key='unit-test-key')


@pytest.fixture
def hash_scheme():
    from keeper.security.credentials import get_credential_scheme
    return get_credential_scheme('hash')


# ============================================================================
# Flask fixtures
# ============================================================================

@pytest.fixture
def app_config():
    """Config overrides for the test app; override this fixture to change them."""
    return make_app_config()


@pytest.fixture
def app(app_config):
    """
    Create Flask app for testing.

    Each test gets a fresh in-memory database with all tables created.
    """
    from webapp.run import create_app
    from webapp.extensions import db
    from keeper.base import Base

    app = create_app(app_config)

    with app.app_context():
        Base.metadata.create_all(db.engine)

    yield app

    with app.app_context():
        db.session.remove()
        Base.metadata.drop_all(db.engine)


@pytest.fixture
def client(app):
    """
    Create Flask test client.

    Returns an unauthenticated test client.
    """
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Flask-SQLAlchemy session inside an application context."""
    from webapp.extensions import db

    with app.app_context():
        yield db.session


@pytest.fixture
def registered_user(app):
    """Credentials of a user registered through the store."""
    from webapp.extensions import db
    from keeper.manage.users import create_user

    with app.app_context():
        create_user(db.session, 'alice@example.com', 'correct horse', app.extensions['credential_scheme'])

    return {'username': 'alice@example.com', 'password': 'correct horse'}


@pytest.fixture
def auth_client(client, registered_user):
    """
    Create authenticated test client (logged in as alice).

    Logs in through the real login form so the session token is issued by
    the session store.
    """
    response = login(client, registered_user['username'], registered_user['password'])
    assert response.status_code == 302, "Test user could not log in"
    return client
