"""
User management functions.

Every function commits its own unit of work through management_transaction.
Uniqueness is enforced by the database: a conflicting insert surfaces as
IntegrityError and is resolved here rather than with application locks.
"""
import hashlib
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from keeper.core.users import User
from keeper.exceptions import DuplicateIdentifier, UserNotFound
from keeper.manage.transaction import management_transaction
from keeper.queries.users import find_user_by_username, find_user_by_id, find_user_by_federated_id
from keeper.security.credentials import CredentialScheme

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = User.__table__.c.username.type.length


def federated_username(provider_name: str, federated_id: str) -> str:
    """
    Local identifier for a federated account: '<provider>:<subject>'.

    Subjects too long to fit the username column are replaced by their
    SHA-256 hex digest, which keeps the identifier unique and bounded.
    """
    username = f"{provider_name}:{federated_id}"
    if len(username) > USERNAME_MAX_LENGTH:
        digest = hashlib.sha256(federated_id.encode('utf-8')).hexdigest()
        username = f"{provider_name}:{digest}"
    return username


def create_user(session: Session, username: str, password: str, scheme: CredentialScheme) -> User:
    """
    Register a local user.

    Args:
        session: SQLAlchemy session
        username: Unique identifier
        password: Raw secret, protected with scheme before storage
        scheme: Deployment credential scheme

    Returns:
        The new User

    Raises:
        DuplicateIdentifier: username already taken
    """
    if find_user_by_username(session, username) is not None:
        raise DuplicateIdentifier(username)

    user = User(username=username, credential=scheme.protect(password))
    try:
        with management_transaction(session):
            session.add(user)
    except IntegrityError as e:
        # Lost a race with a concurrent registration
        raise DuplicateIdentifier(username) from e

    logger.info(f"Registered user {username} (id={user.user_id})")
    return user


def find_or_create_federated_user(session: Session, federated_id: str, provider_name: str = 'provider') -> User:
    """
    Resolve the local user for a provider subject id, creating it on first login.

    Conflict resolution: the unique constraint on users.federated_id decides
    the winner when two requests race. The loser's insert fails with
    IntegrityError, its transaction is rolled back, and the row the winner
    committed is returned instead.

    Args:
        session: SQLAlchemy session
        federated_id: Stable subject identifier asserted by the provider
        provider_name: Provider label, used to build the local identifier

    Returns:
        The existing or newly created User

    Raises:
        DuplicateIdentifier: the local identifier is held by an unrelated account
    """
    user = find_user_by_federated_id(session, federated_id)
    if user is not None:
        return user

    username = federated_username(provider_name, federated_id)
    user = User(username=username, federated_id=federated_id)
    try:
        with management_transaction(session):
            session.add(user)
    except IntegrityError as e:
        existing = find_user_by_federated_id(session, federated_id)
        if existing is None:
            # The conflict was on users.username, held by another account
            raise DuplicateIdentifier(username) from e
        logger.info(f"Concurrent federated login for {provider_name} subject resolved to user {existing.user_id}")
        return existing

    logger.info(f"Created federated user {user.username} (id={user.user_id})")
    return user


def update_secret_text(session: Session, user_id: int, text: str) -> User:
    """
    Store a new secret for a user, replacing any previous one.

    Raises:
        UserNotFound: no user with this id
    """
    user = find_user_by_id(session, user_id)
    if user is None:
        raise UserNotFound(user_id)

    with management_transaction(session):
        user.secret_text = text

    logger.info(f"Stored secret for user {user.username}")
    return user
