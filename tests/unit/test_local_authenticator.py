"""
Unit tests for LocalAuthenticator.
"""

import pytest

from keeper.exceptions import InvalidCredentials
from keeper.manage.users import create_user, find_or_create_federated_user
from webapp.auth.providers import LocalAuthenticator, AuthResult


@pytest.fixture(params=['encrypt', 'hash'])
def scheme(request, encrypt_scheme, hash_scheme):
    """Run every test against both deployment variants."""
    return encrypt_scheme if request.param == 'encrypt' else hash_scheme


@pytest.fixture
def authenticator(session, scheme):
    create_user(session, 'alice@example.com', 'correct horse', scheme)
    return LocalAuthenticator(session, scheme)


class TestLocalAuthenticator:

    def test_correct_credentials(self, authenticator):
        result = authenticator.authenticate({'username': 'alice@example.com', 'password': 'correct horse'})

        assert isinstance(result, AuthResult)
        assert result.success
        assert result.user.username == 'alice@example.com'
        assert result.user_id == result.user.user_id

    def test_username_whitespace_ignored(self, authenticator):
        result = authenticator.authenticate({'username': '  alice@example.com ', 'password': 'correct horse'})
        assert result.success

    def test_wrong_password(self, authenticator):
        with pytest.raises(InvalidCredentials):
            authenticator.authenticate({'username': 'alice@example.com', 'password': 'wrong'})

    def test_unknown_username(self, authenticator):
        with pytest.raises(InvalidCredentials):
            authenticator.authenticate({'username': 'mallory@example.com', 'password': 'correct horse'})

    def test_failures_are_indistinguishable(self, authenticator):
        """Wrong password and unknown user raise the same error with the same message."""
        with pytest.raises(InvalidCredentials) as wrong_password:
            authenticator.authenticate({'username': 'alice@example.com', 'password': 'wrong'})
        with pytest.raises(InvalidCredentials) as unknown_user:
            authenticator.authenticate({'username': 'mallory@example.com', 'password': 'wrong'})

        assert type(wrong_password.value) is type(unknown_user.value)
        assert str(wrong_password.value) == str(unknown_user.value)

    @pytest.mark.parametrize('credentials', [
        {},
        {'username': 'alice@example.com'},
        {'password': 'correct horse'},
        {'username': '', 'password': 'correct horse'},
        {'username': 'alice@example.com', 'password': ''},
    ])
    def test_malformed_input(self, authenticator, credentials):
        with pytest.raises(InvalidCredentials):
            authenticator.authenticate(credentials)

    def test_federated_account_has_no_password(self, session, scheme):
        """Accounts created by federated login cannot log in locally."""
        user = find_or_create_federated_user(session, 'sub-1', provider_name='google')
        authenticator = LocalAuthenticator(session, scheme)

        with pytest.raises(InvalidCredentials):
            authenticator.authenticate({'username': user.username, 'password': 'anything'})
