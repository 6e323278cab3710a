"""
OAuth 2.0 identity provider client.

Implements the two server-side legs of the authorization code flow:
building the authorization URL the browser is redirected to, and exchanging
the returned code for an access token and the provider's userinfo profile.

Every HTTP call carries a bounded timeout. Failures of any kind (timeout,
connection error, non-2xx status, malformed JSON) surface as
ProviderExchangeFailure; nothing is retried.
"""

import logging
from typing import Dict, List, Optional, Any
from urllib.parse import urlencode

import requests
from marshmallow import ValidationError

from keeper.exceptions import ProviderExchangeFailure
from keeper.schemas import ProviderProfileSchema

logger = logging.getLogger(__name__)


class OAuthProviderClient:
    """
    Client for an OAuth 2.0 / OpenID Connect provider.

    Example:
        >>> client = OAuthProviderClient(
        ...     client_id='abc.apps.googleusercontent.com',
        ...     client_secret='...',
        ...     redirect_uri='http://localhost:3000/auth/provider/callback',
        ... )
        >>> url = client.authorization_url(['profile'], state='nonce')
        >>> token = client.exchange_code(code)
        >>> profile = client.fetch_profile(token)
        >>> profile['subject']
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        authorize_url: str = 'https://accounts.google.com/o/oauth2/v2/auth',
        token_url: str = 'https://oauth2.googleapis.com/token',
        userinfo_url: str = 'https://openidconnect.googleapis.com/v1/userinfo',
        name: str = 'google',
        timeout: int = 10
    ):
        """
        Initialize provider client.

        Args:
            client_id: OAuth client id registered with the provider
            client_secret: OAuth client secret
            redirect_uri: Callback URL registered with the provider
            authorize_url: Provider authorization endpoint
            token_url: Provider token endpoint
            userinfo_url: Provider userinfo endpoint
            name: Provider label (used in local identifiers and logs)
            timeout: Request timeout in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.authorize_url = authorize_url
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.name = name
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> Optional['OAuthProviderClient']:
        """Build a client from Flask config, or None when the provider is not configured."""
        if not config.get('OAUTH_CLIENT_ID') or not config.get('OAUTH_CLIENT_SECRET'):
            return None
        return cls(
            client_id=config['OAUTH_CLIENT_ID'],
            client_secret=config['OAUTH_CLIENT_SECRET'],
            redirect_uri=config['OAUTH_CALLBACK_URL'],
            authorize_url=config['OAUTH_AUTHORIZE_URL'],
            token_url=config['OAUTH_TOKEN_URL'],
            userinfo_url=config['OAUTH_USERINFO_URL'],
            name=config.get('OAUTH_PROVIDER_NAME', 'google'),
            timeout=config.get('OAUTH_TIMEOUT', 10),
        )

    def authorization_url(self, scopes: List[str], state: str) -> str:
        """Build the provider URL the browser is sent to."""
        params = {
            'response_type': 'code',
            'client_id': self.client_id,
            'redirect_uri': self.redirect_uri,
            'scope': ' '.join(scopes),
            'state': state,
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    def exchange_code(self, code: str) -> str:
        """
        Exchange an authorization code for an access token.

        Returns:
            Access token string

        Raises:
            ProviderExchangeFailure: on any transport, status or payload error
        """
        data = self._request(
            'post',
            self.token_url,
            data={
                'grant_type': 'authorization_code',
                'code': code,
                'redirect_uri': self.redirect_uri,
                'client_id': self.client_id,
                'client_secret': self.client_secret,
            },
            headers={'Accept': 'application/json'},
        )

        access_token = data.get('access_token')
        if not access_token:
            raise ProviderExchangeFailure(f"{self.name} token response did not include an access token")
        return access_token

    def fetch_profile(self, access_token: str) -> Dict[str, Any]:
        """
        Fetch the provider-asserted profile for an access token.

        Returns:
            Dict with at least 'subject' (stable provider user id)

        Raises:
            ProviderExchangeFailure: on transport errors or a profile without a subject
        """
        data = self._request(
            'get',
            self.userinfo_url,
            headers={
                'Authorization': f'Bearer {access_token}',
                'Accept': 'application/json',
            },
        )

        try:
            return ProviderProfileSchema().load(data)
        except ValidationError as e:
            raise ProviderExchangeFailure(f"{self.name} profile rejected: {e.messages}") from e

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        """Issue one HTTP request and decode its JSON object body."""
        try:
            response = getattr(requests, method)(url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise ProviderExchangeFailure(f"{self.name} did not answer within {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise ProviderExchangeFailure(f"Could not reach {self.name}: {e}") from e

        if not response.ok:
            raise ProviderExchangeFailure(
                f"{self.name} returned HTTP {response.status_code} for {url}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderExchangeFailure(f"{self.name} returned a non-JSON body for {url}") from e

        if not isinstance(data, dict):
            raise ProviderExchangeFailure(f"{self.name} returned an unexpected payload for {url}")
        return data
