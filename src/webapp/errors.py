"""
Application-wide error handlers.

Store outages and unexpected errors render a generic failure page; the
underlying exception is logged, never shown.
"""

import logging

from flask import render_template
from sqlalchemy.exc import OperationalError

from keeper.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """
    Register generic HTML error handlers on the application.

    Usage:
        from webapp.errors import register_error_handlers
        register_error_handlers(app)
    """

    @app.errorhandler(StoreUnavailable)
    def store_unavailable(e):
        logger.error(f"Backing store unavailable: {e}")
        return render_template('error.html', message='The service is temporarily unavailable.'), 503

    @app.errorhandler(OperationalError)
    def store_operational_error(e):
        logger.error(f"Backing store unavailable: {e.orig}")
        return render_template('error.html', message='The service is temporarily unavailable.'), 503

    @app.errorhandler(404)
    def not_found(e):
        return render_template('error.html', message='Page not found.'), 404

    @app.errorhandler(500)
    def internal_error(e):
        original = getattr(e, 'original_exception', None)
        logger.error(f"Unhandled error: {original or e}", exc_info=original)
        return render_template('error.html', message='Something went wrong.'), 500
