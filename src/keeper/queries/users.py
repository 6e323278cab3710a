"""
User query functions.

Functions:
    find_user_by_username: Look up a user by identifier
    find_user_by_id: Look up a user by primary key, optionally refreshed
    find_user_by_federated_id: Look up a user by provider subject id
    get_submitted_secrets: All non-null secret texts
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from keeper.core.users import User


def find_user_by_username(session: Session, username: str) -> Optional[User]:
    """
    Find a user by identifier.

    Args:
        session: SQLAlchemy session
        username: Identifier to look up

    Returns:
        User object or None if not found
    """
    if not username:
        return None
    return User.get_by_username(session, username)


def find_user_by_id(session: Session, user_id: int, refresh: bool = False) -> Optional[User]:
    """
    Find a user by primary key.

    Args:
        session: SQLAlchemy session
        user_id: User primary key
        refresh: Overwrite any copy already in the session's identity map
                 with the current database row

    Returns:
        User object or None if not found
    """
    stmt = select(User).where(User.user_id == user_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    return session.execute(stmt).scalar_one_or_none()


def find_user_by_federated_id(session: Session, federated_id: str) -> Optional[User]:
    """Find the user linked to a provider subject id."""
    if not federated_id:
        return None
    return User.get_by_federated_id(session, federated_id)


def get_submitted_secrets(session: Session) -> List[str]:
    """
    Get every stored secret text.

    Returns:
        List of secret strings, ordered by user_id; users without a secret
        are skipped.
    """
    rows = session.execute(
        select(User.secret_text)
        .where(User.secret_text.is_not(None))
        .order_by(User.user_id)
    ).scalars().all()
    return list(rows)
