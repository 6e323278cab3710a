"""
Secrets keeper domain layer.

ORM models, credential protection, queries and management functions for the
secrets web application.
"""

from .base import Base
from .core.users import User
from .core.sessions import LoginSession
from .exceptions import (
    KeeperError,
    DuplicateIdentifier,
    InvalidCredentials,
    ProviderExchangeFailure,
    StoreUnavailable,
    UserNotFound,
)

__all__ = [
    'Base',
    'User',
    'LoginSession',
    'KeeperError',
    'DuplicateIdentifier',
    'InvalidCredentials',
    'ProviderExchangeFailure',
    'StoreUnavailable',
    'UserNotFound',
]
