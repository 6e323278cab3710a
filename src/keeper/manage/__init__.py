"""
Write operations for the secrets keeper.

Usage:
    from keeper.manage import create_user, establish_session
"""

from .transaction import management_transaction
from .users import create_user, find_or_create_federated_user, update_secret_text
from .sessions import establish_session, resolve_session, destroy_session

__all__ = [
    'management_transaction',
    'create_user',
    'find_or_create_federated_user',
    'update_secret_text',
    'establish_session',
    'resolve_session',
    'destroy_session',
]
