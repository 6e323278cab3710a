"""
Transaction management utilities for keeper management functions.

Provides a context manager to ensure proper commit/rollback handling and to
translate connectivity failures into StoreUnavailable.
"""
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from keeper.exceptions import StoreUnavailable


@contextmanager
def management_transaction(session: Session):
    """
    Context manager ensuring commit/rollback for management functions.

    Usage:
        with management_transaction(db.session):
            session.add(user)
        # Auto-commits on success, rolls back on exception

    Args:
        session: SQLAlchemy session

    Yields:
        Session: The same session (for convenience)

    Raises:
        StoreUnavailable: the database could not be reached
        Any other exception raised within the context block (after rollback)
    """
    try:
        yield session
        session.commit()
    except OperationalError as e:
        session.rollback()
        raise StoreUnavailable(str(e.orig)) from e
    except Exception:
        session.rollback()
        raise
