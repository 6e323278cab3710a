"""
Authentication module for the secrets web application.

Provides local and federated authenticators, the Flask-Login user wrapper
and the session bridge to keeper's token store.
"""

from .models import AuthUser
from .providers import (
    AuthResult,
    Authenticator,
    LocalAuthenticator,
    FederatedAuthenticator,
    FederatedLoginAttempt,
    FederatedLoginState,
)

__all__ = [
    'AuthUser',
    'AuthResult',
    'Authenticator',
    'LocalAuthenticator',
    'FederatedAuthenticator',
    'FederatedLoginAttempt',
    'FederatedLoginState',
]
