"""
Session lifecycle: issue, resolve and revoke opaque login tokens.

Tokens live in the login_sessions table, so revoking one takes effect for
every copy of the cookie that carries it.
"""
import logging
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from keeper.core.sessions import LoginSession
from keeper.core.users import User
from keeper.manage.transaction import management_transaction
from keeper.queries.users import find_user_by_id

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def establish_session(session: Session, user_id: int) -> str:
    """
    Issue a new session token for a user.

    Returns:
        Opaque token string
    """
    token = secrets.token_urlsafe(TOKEN_BYTES)
    with management_transaction(session):
        session.add(LoginSession(token=token, user_id=user_id))
    logger.debug(f"Established session for user {user_id}")
    return token


def resolve_session(session: Session, token: Optional[str], max_age: Optional[int] = None) -> Optional[User]:
    """
    Map a session token to its user.

    The user row is re-read from the database on every call so changes made
    since login (a new secret, for instance) are visible.

    Args:
        session: SQLAlchemy session
        token: Token from the client, possibly None or stale
        max_age: Optional maximum session age in seconds

    Returns:
        User, or None (anonymous) for unknown, empty or expired tokens.
        An expired token is deleted when it is seen.
    """
    if not token:
        return None

    login_session = session.get(LoginSession, token)
    if login_session is None:
        return None

    if login_session.is_expired(max_age):
        logger.debug(f"Session for user {login_session.user_id} expired")
        destroy_session(session, token)
        return None

    return find_user_by_id(session, login_session.user_id, refresh=True)


def destroy_session(session: Session, token: Optional[str]) -> None:
    """Revoke a session token. Unknown tokens are ignored."""
    if not token:
        return

    with management_transaction(session):
        session.query(LoginSession).filter(LoginSession.token == token).delete(synchronize_session=False)
