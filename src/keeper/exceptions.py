"""
Exception taxonomy for the secrets keeper.

Every failure the web layer knows how to render derives from KeeperError.
"""


class KeeperError(Exception):
    """Base exception for keeper errors."""
    pass


class DuplicateIdentifier(KeeperError):
    """A user with this identifier already exists."""

    def __init__(self, username: str):
        super().__init__(f"User '{username}' already exists")
        self.username = username


class InvalidCredentials(KeeperError):
    """
    Login failed.

    Raised identically for an unknown identifier and a wrong secret so
    callers cannot tell the two apart.
    """

    def __init__(self):
        super().__init__("Invalid username or password")


class ProviderExchangeFailure(KeeperError):
    """The identity provider exchange failed (network, provider or payload error)."""
    pass


class StoreUnavailable(KeeperError):
    """The backing store could not be reached."""
    pass


class UserNotFound(KeeperError):
    """A user record expected to exist is missing."""

    def __init__(self, user_id):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id
