"""
Query helpers for the secrets keeper.

Read-only lookups; write operations live in keeper.manage.
"""

from .users import (
    find_user_by_username,
    find_user_by_id,
    find_user_by_federated_id,
    get_submitted_secrets,
)

__all__ = [
    'find_user_by_username',
    'find_user_by_id',
    'find_user_by_federated_id',
    'get_submitted_secrets',
]
