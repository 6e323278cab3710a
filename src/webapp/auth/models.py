"""
Flask-Login user wrapper for the keeper User model.

This provides a thin adapter between keeper's User model and Flask-Login's
requirements. The id handed to Flask-Login is the opaque session token, not
the user's primary key, so revoking the token server side logs the browser
out even if it still holds the old cookie.
"""

from flask_login import UserMixin
from keeper.core.users import User


class AuthUser(UserMixin):
    """
    Flask-Login compatible user wrapper.

    Wraps a keeper User object together with the session token that
    resolved it.
    """

    def __init__(self, user: User, session_token: str):
        """
        Initialize with a keeper User object.

        Args:
            user: keeper User ORM object
            session_token: Token issued by keeper.manage.establish_session
        """
        self.user = user
        self.session_token = session_token

    def get_id(self):
        """Return the session token (required by Flask-Login)."""
        return self.session_token

    @property
    def is_authenticated(self):
        """Return True if user is authenticated (required by Flask-Login)."""
        return True

    @property
    def is_anonymous(self):
        """Return False - authenticated users are not anonymous."""
        return False

    # Convenience properties to access keeper User attributes
    @property
    def user_id(self):
        return self.user.user_id

    @property
    def username(self):
        return self.user.username

    @property
    def secret_text(self):
        return self.user.secret_text

    def __repr__(self):
        return f"<AuthUser(username='{self.username}')>"
