"""
Bridge between keeper's session store and Flask-Login.

establish() issues a token and logs the wrapped user in; end() revokes the
token and clears the Flask-Login session. load_user() is registered as the
Flask-Login user_loader and runs on every request that carries a token.
"""

import logging

from flask import current_app
from flask_login import login_user, logout_user, current_user

from keeper.core.users import User
from keeper.manage.sessions import establish_session, resolve_session, destroy_session
from webapp.auth.models import AuthUser
from webapp.extensions import db

logger = logging.getLogger(__name__)


def establish(user: User) -> AuthUser:
    """Issue a session token for user and log them in, revoking any token the browser already holds."""
    if current_user.is_authenticated:
        end()
    token = establish_session(db.session, user.user_id)
    auth_user = AuthUser(user, token)
    login_user(auth_user)
    logger.info(f"User {user.username} logged in")
    return auth_user


def load_user(token):
    """Resolve a session token to an AuthUser; None means anonymous."""
    user = resolve_session(db.session, token, max_age=current_app.config.get('SESSION_MAX_AGE'))
    if user is None:
        return None
    return AuthUser(user, token)


def end() -> None:
    """Revoke the current session token (if any) and log out."""
    if current_user.is_authenticated:
        username = current_user.username
        destroy_session(db.session, current_user.session_token)
        logger.info(f"User {username} logged out")
    logout_user()
