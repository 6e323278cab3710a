"""
Application factory configuration: credential scheme selection, session
lifetime, provider toggling and the CLI commands.
"""

from datetime import datetime, timedelta

import pytest

from fixtures.client_helpers import register, login, redirect_path
from fixtures.test_config import make_app_config


class TestCredentialSchemeSelection:

    def test_encrypt_is_default(self, app):
        from keeper.security.credentials import EncryptedCredentialScheme
        assert isinstance(app.extensions['credential_scheme'], EncryptedCredentialScheme)

    def test_encrypt_without_key(self):
        from webapp.run import create_app

        with pytest.raises(ValueError, match='CREDENTIAL_KEY'):
            create_app(make_app_config(CREDENTIAL_KEY=None))

    def test_unknown_scheme(self):
        from webapp.run import create_app

        with pytest.raises(ValueError, match='Unknown credential scheme'):
            create_app(make_app_config(CREDENTIAL_SCHEME='rot13'))


class TestHashedDeployment:
    """The whole register/login flow with the one-way hash scheme."""

    @pytest.fixture
    def app_config(self):
        return make_app_config(CREDENTIAL_SCHEME='hash', CREDENTIAL_KEY=None)

    def test_register_and_login(self, app, client):
        from keeper.core.users import User
        from webapp.extensions import db

        assert register(client, 'bob@example.com', 'hunter2').status_code == 302
        client.get('/logout')

        assert login(client, 'bob@example.com', 'wrong').status_code == 401
        response = login(client, 'bob@example.com', 'hunter2')
        assert redirect_path(response) == '/secrets'

        with app.app_context():
            user = db.session.query(User).filter_by(username='bob@example.com').one()
            assert user.credential.startswith('scrypt:')
            assert 'hunter2' not in user.credential


class TestSessionMaxAge:

    @pytest.fixture
    def app_config(self):
        return make_app_config(SESSION_MAX_AGE=3600)

    def test_fresh_session_is_valid(self, auth_client):
        assert auth_client.get('/secrets').status_code == 200

    def test_expired_session_is_anonymous(self, app, auth_client):
        from keeper.core.sessions import LoginSession
        from webapp.extensions import db

        with app.app_context():
            for login_session in db.session.query(LoginSession).all():
                login_session.creation_time = datetime.now() - timedelta(hours=2)
            db.session.commit()

        assert redirect_path(auth_client.get('/secrets')) == '/login'


class TestProviderToggle:

    def test_configured(self, app):
        client = app.extensions['oauth_client']
        assert client is not None
        assert client.name == 'testprovider'

    def test_missing_secret_disables_provider(self):
        from webapp.run import create_app

        app = create_app(make_app_config(OAUTH_CLIENT_SECRET=None))
        assert app.extensions['oauth_client'] is None


class TestCliCommands:

    def test_init_db(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=['init-db'])

        assert result.exit_code == 0
        assert 'Initialized database' in result.output

    def test_list_users_empty(self, app):
        result = app.test_cli_runner().invoke(args=['list-users'])

        assert result.exit_code == 0
        assert 'No users registered.' in result.output

    def test_list_users(self, app, registered_user):
        result = app.test_cli_runner().invoke(args=['list-users'])

        assert result.exit_code == 0
        assert registered_user['username'] in result.output
        assert 'local' in result.output
        assert '1 user(s)' in result.output
        assert registered_user['password'] not in result.output
