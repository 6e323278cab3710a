"""
Authentication providers for the secrets web application.

Both providers implement the Authenticator capability,
authenticate(credentials) -> AuthResult, and each route constructs the one
it needs:

- LocalAuthenticator: identifier/password checked against the Credential Store
- FederatedAuthenticator: OAuth 2.0 authorization code exchanged with an
  external identity provider, reconciled to a local user by subject id
"""

import enum
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from marshmallow import ValidationError

from keeper.core.users import User
from keeper.exceptions import DuplicateIdentifier, InvalidCredentials, ProviderExchangeFailure
from keeper.manage.users import find_or_create_federated_user
from keeper.queries.users import find_user_by_username
from keeper.schemas import CredentialsSchema
from keeper.security.credentials import CredentialScheme
from webapp.clients.oauth import OAuthProviderClient

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Outcome of a successful authentication."""
    success: bool
    user_id: int
    user: User = field(repr=False)


class Authenticator(ABC):
    """
    Abstract base class for authentication providers.

    All authentication providers must implement authenticate().
    """

    def __init__(self, db_session):
        """
        Initialize the provider with database session access.

        Args:
            db_session: SQLAlchemy session (Flask-SQLAlchemy db.session)
        """
        self.db_session = db_session

    @abstractmethod
    def authenticate(self, credentials: Mapping[str, Any]) -> AuthResult:
        """
        Authenticate a set of credentials.

        Returns:
            AuthResult for the resolved local user

        Raises:
            KeeperError subclass describing the failure
        """
        pass


class LocalAuthenticator(Authenticator):
    """Identifier and password checked against stored credential material."""

    def __init__(self, db_session, scheme: CredentialScheme):
        super().__init__(db_session)
        self.scheme = scheme

    def authenticate(self, credentials: Mapping[str, Any]) -> AuthResult:
        """
        Verify an identifier/password pair.

        Args:
            credentials: Mapping with 'username' and 'password'

        Raises:
            InvalidCredentials: malformed input, unknown identifier, account
                without a local password, or wrong password. The cases are
                indistinguishable to the caller.
        """
        try:
            data = CredentialsSchema().load(dict(credentials))
        except ValidationError:
            raise InvalidCredentials()

        user = find_user_by_username(self.db_session, data['username'])
        if user is None or not user.has_local_credential:
            logger.info("Login rejected: no local account for presented identifier")
            raise InvalidCredentials()

        if not self.scheme.verify(user.credential, data['password']):
            logger.info(f"Login rejected: wrong password for user {user.user_id}")
            raise InvalidCredentials()

        return AuthResult(success=True, user_id=user.user_id, user=user)


# ============================================================================
# Federated login
# ============================================================================

class FederatedLoginState(enum.Enum):
    UNAUTHENTICATED = 'unauthenticated'
    AWAITING_PROVIDER_REDIRECT = 'awaiting_provider_redirect'
    AWAITING_PROVIDER_CALLBACK = 'awaiting_provider_callback'
    AUTHENTICATED = 'authenticated'
    FAILED = 'failed'


@dataclass
class FederatedLoginAttempt:
    """
    One pass through the federated login state machine.

    UNAUTHENTICATED -> AWAITING_PROVIDER_REDIRECT -> AWAITING_PROVIDER_CALLBACK
    -> AUTHENTICATED | FAILED. Both end states are terminal.

    The attempt is stored in the Flask session between the redirect and the
    callback, together with the state nonce the provider must echo back.
    """
    state: FederatedLoginState = FederatedLoginState.UNAUTHENTICATED
    nonce: Optional[str] = None
    failure_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (FederatedLoginState.AUTHENTICATED, FederatedLoginState.FAILED)

    def start(self) -> str:
        if self.state is not FederatedLoginState.UNAUTHENTICATED:
            raise ProviderExchangeFailure(f"Cannot start federated login from state {self.state.value}")
        self.nonce = secrets.token_urlsafe(24)
        self.state = FederatedLoginState.AWAITING_PROVIDER_REDIRECT
        return self.nonce

    def mark_redirected(self) -> None:
        if self.state is not FederatedLoginState.AWAITING_PROVIDER_REDIRECT:
            raise ProviderExchangeFailure(f"No provider redirect pending (state {self.state.value})")
        self.state = FederatedLoginState.AWAITING_PROVIDER_CALLBACK

    def succeed(self) -> None:
        self.state = FederatedLoginState.AUTHENTICATED

    def fail(self, reason: str) -> None:
        self.state = FederatedLoginState.FAILED
        self.failure_reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            'state': self.state.value,
            'nonce': self.nonce,
            'failure_reason': self.failure_reason,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'FederatedLoginAttempt':
        """Rebuild an attempt from session data; missing or corrupt data is a fresh attempt."""
        if not data:
            return cls()
        try:
            state = FederatedLoginState(data.get('state'))
        except ValueError:
            return cls()
        return cls(state=state, nonce=data.get('nonce'), failure_reason=data.get('failure_reason'))


class FederatedAuthenticator(Authenticator):
    """
    OAuth 2.0 authorization code login against an external identity provider.

    Example:
        authenticator = FederatedAuthenticator(db.session, client)
        url = authenticator.begin_federated_login(['profile'])
        authenticator.attempt.mark_redirected()
        ... browser returns with ?code=...&state=...
        result = authenticator.complete_federated_login(code, state)
    """

    DEFAULT_SCOPES = ['profile']

    def __init__(self, db_session, client: OAuthProviderClient, attempt: FederatedLoginAttempt = None):
        """
        Args:
            db_session: SQLAlchemy session
            client: Configured provider client
            attempt: Attempt restored from the session (default: a fresh one)
        """
        super().__init__(db_session)
        self.client = client
        self.attempt = attempt or FederatedLoginAttempt()

    def begin_federated_login(self, requested_scopes: List[str] = None) -> str:
        """
        Start a login attempt.

        Returns:
            Provider authorization URL to redirect the browser to
        """
        nonce = self.attempt.start()
        scopes = requested_scopes or self.DEFAULT_SCOPES
        logger.info(f"Starting {self.client.name} login, scopes={scopes}")
        return self.client.authorization_url(scopes, state=nonce)

    def complete_federated_login(
        self,
        authorization_code: Optional[str],
        state: Optional[str] = None,
        error: Optional[str] = None
    ) -> AuthResult:
        """
        Finish a login attempt with the provider's callback parameters.

        Raises:
            ProviderExchangeFailure: any failure; the attempt is left FAILED
        """
        try:
            user = self._complete(authorization_code, state, error)
        except ProviderExchangeFailure as e:
            self.attempt.fail(str(e))
            logger.warning(f"{self.client.name} login failed: {e}")
            raise

        self.attempt.succeed()
        return AuthResult(success=True, user_id=user.user_id, user=user)

    def _complete(self, authorization_code, state, error) -> User:
        if self.attempt.state is not FederatedLoginState.AWAITING_PROVIDER_CALLBACK:
            raise ProviderExchangeFailure(
                f"No {self.client.name} login in progress (state {self.attempt.state.value})"
            )
        if error:
            raise ProviderExchangeFailure(f"{self.client.name} reported error: {error}")
        expected = (self.attempt.nonce or '').encode('utf-8')
        if not state or not secrets.compare_digest(state.encode('utf-8'), expected):
            raise ProviderExchangeFailure("State parameter does not match the login attempt")
        if not authorization_code:
            raise ProviderExchangeFailure("Callback did not include an authorization code")

        access_token = self.client.exchange_code(authorization_code)
        profile = self.client.fetch_profile(access_token)

        try:
            return find_or_create_federated_user(
                self.db_session, profile['subject'], provider_name=self.client.name
            )
        except DuplicateIdentifier as e:
            raise ProviderExchangeFailure(f"Local identifier {e.username} belongs to another account") from e

    def authenticate(self, credentials: Mapping[str, Any]) -> AuthResult:
        """Complete the attempt from callback parameters ('code', 'state', 'error')."""
        return self.complete_federated_login(
            credentials.get('code'),
            state=credentials.get('state'),
            error=credentials.get('error'),
        )
