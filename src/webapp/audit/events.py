"""
SQLAlchemy event handlers for audit logging.

Registers before_flush event listener to track INSERT, UPDATE, DELETE operations.
"""
import logging
from datetime import datetime

from flask import has_request_context
from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from .logger import get_audit_logger

_log = logging.getLogger(__name__)

# Global flag to prevent double-registration when several apps are created
_AUDIT_EVENTS_REGISTERED = False

# Session tokens are bearer credentials
EXCLUDED_MODELS = {'LoginSession'}

# Attribute values never written to the audit log
REDACTED_ATTRIBUTES = {'credential', 'secret_text'}
REDACTED = '<redacted>'

_listener = None


def responsible_user():
    """
    Get username of currently logged-in user.

    Returns:
        str: Username of authenticated user, or "anonymous" if not logged in
    """
    if not has_request_context():
        # CLI, background job, or test code outside a request
        return "anonymous"

    from flask_login import current_user

    if current_user and current_user.is_authenticated:
        return current_user.username
    return "anonymous"


def should_track(obj):
    """
    Determine if object changes should be tracked.

    Args:
        obj: SQLAlchemy model instance

    Returns:
        bool: True if should be tracked, False otherwise
    """
    if not hasattr(obj, "__table__"):
        return False

    if obj.__class__.__name__ in EXCLUDED_MODELS:
        return False

    return True


def get_primary_key(obj):
    """Get primary key value(s) for an object, None before the first flush."""
    return inspect(obj).identity


def _serialize(key, value):
    if key in REDACTED_ATTRIBUTES and value is not None:
        return REDACTED
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def diff_for_object(obj):
    """
    Extract changed attributes and their old/new values.

    Args:
        obj: SQLAlchemy model instance

    Returns:
        dict: Dictionary of {attribute: {'old': value, 'new': value}}
    """
    insp = inspect(obj)
    changes = {}

    for attr in insp.attrs:
        hist = attr.history
        if hist.has_changes():
            old_value = hist.deleted[0] if hist.deleted else None
            new_value = hist.added[0] if hist.added else None

            changes[attr.key] = {
                "old": _serialize(attr.key, old_value),
                "new": _serialize(attr.key, new_value),
            }

    return changes


def init_audit_events(app, logfile_path):
    """
    Initialize SQLAlchemy event handlers for audit logging.

    Args:
        app: Flask application instance
        logfile_path: Path to audit log file
    """
    global _AUDIT_EVENTS_REGISTERED, _listener

    if _AUDIT_EVENTS_REGISTERED:
        return

    logger = get_audit_logger(logfile_path)

    def before_flush(session, flush_context, instances):
        """
        Event handler triggered before database flush.

        Captures INSERT, UPDATE, DELETE operations and logs them.
        """
        user = responsible_user()

        for obj in session.new:
            if should_track(obj):
                logger.info(
                    f"user={user} action=INSERT model={obj.__class__.__name__} obj={obj}"
                )

        for obj in session.dirty:
            if should_track(obj) and session.is_modified(obj, include_collections=False):
                changes = diff_for_object(obj)
                if changes:
                    logger.info(
                        f"user={user} action=UPDATE model={obj.__class__.__name__} "
                        f"pk={get_primary_key(obj)} changes={changes}"
                    )

        for obj in session.deleted:
            if should_track(obj):
                logger.info(
                    f"user={user} action=DELETE model={obj.__class__.__name__} "
                    f"pk={get_primary_key(obj)} obj={obj}"
                )

    # Register the event listener on ALL sessions
    event.listen(Session, "before_flush", before_flush)
    _listener = before_flush

    _AUDIT_EVENTS_REGISTERED = True
    _log.debug(f"Audit events registered, writing to {logfile_path}")


def reset_audit_events():
    """
    Remove the audit listener and reset the registration flag.

    This is primarily for testing purposes where multiple tests
    might need to reinitialize audit events.
    """
    global _AUDIT_EVENTS_REGISTERED, _listener

    if _listener is not None and event.contains(Session, "before_flush", _listener):
        event.remove(Session, "before_flush", _listener)
    _listener = None
    _AUDIT_EVENTS_REGISTERED = False
